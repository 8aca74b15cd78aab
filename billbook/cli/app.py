import questionary
from rich.console import Console

from billbook.cli.bill_menu import create_bill_menu, list_bills_menu, search_bills_menu
from billbook.repositories.factory import get_bill_repository
from billbook.services.bill_service import BillService

console = Console()


def _build_services() -> BillService:
    return BillService(get_bill_repository())


def main_menu() -> None:
    bill_service = _build_services()

    console.print()
    console.print("[bold]Billbook[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "List Bills",
                "Search Bills",
                "Create Bill",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "List Bills":
            list_bills_menu(bill_service)
        elif choice == "Search Bills":
            search_bills_menu(bill_service)
        elif choice == "Create Bill":
            create_bill_menu(bill_service)
