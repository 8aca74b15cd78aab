from __future__ import annotations

import datetime as dt
from pathlib import Path

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from billbook.errors import BillbookError, NotFoundError, ValidationError
from billbook.forms import (
    BillForm,
    FieldChange,
    FormField,
    add_item,
    apply_change,
    form_errors,
    remove_item,
    to_request,
)
from billbook.models import format_inr, parse_amount
from billbook.models.bill import Bill
from billbook.services.bill_service import BillService
from billbook.settings import settings

console = Console()


def _report_error(exc: BillbookError) -> None:
    if isinstance(exc, ValidationError):
        console.print("[red]Invalid input:[/red]")
        for path, message in exc.fields.items():
            console.print(f"  [red]{path}: {message}[/red]")
    elif isinstance(exc, NotFoundError):
        console.print("[red]Bill not found.[/red]")
    else:
        console.print("[red]Could not save the bill. Please try again.[/red]")


def _ask_date(prompt: str, default: dt.date) -> dt.date:
    while True:
        val = questionary.text(f"{prompt} (YYYY-MM-DD):", default=default.isoformat()).ask()
        if not val:
            return default
        try:
            return dt.date.fromisoformat(val.strip())
        except ValueError:
            console.print("[red]Invalid date. Use YYYY-MM-DD.[/red]")


def _ask_item(form: BillForm, index: int) -> BillForm | None:
    """Fill the item at ``index``; None when the user leaves the name empty."""
    name = questionary.text("  Item name:").ask()
    if not name:
        return None
    form = apply_change(form, FieldChange(field=FormField.ITEM_NAME, value=name, index=index))

    while True:
        val = questionary.text("  Quantity:", default="1").ask()
        try:
            quantity = int(val or "1")
        except ValueError:
            quantity = 0
        if quantity >= 1:
            form = apply_change(form, FieldChange(field=FormField.ITEM_QUANTITY, value=quantity, index=index))
            break
        console.print("[red]Quantity must be a whole number of at least 1.[/red]")

    while True:
        val = questionary.text("  Unit price (e.g. 250.00):").ask()
        price = parse_amount(val or "")
        if price is not None and price > 0:
            return apply_change(form, FieldChange(field=FormField.ITEM_PRICE, value=price, index=index))
        console.print("[red]Invalid price. Try again.[/red]")


def _ask_items() -> list[dict]:
    """Collect new items through a throwaway form, returned as wire payloads."""
    form = BillForm(customer_name="-", items=())
    while questionary.confirm("Add an item?", default=True).ask():
        candidate = _ask_item(add_item(form), len(form.items))
        if candidate is not None:
            form = candidate
            console.print(f"  [green]Item added: {form.items[-1].name}[/green]")
    return to_request(form)["items"]


def _show_bill_detail(bill: Bill) -> None:
    detail_table = Table()
    detail_table.add_column("Item")
    detail_table.add_column("Qty", justify="center")
    detail_table.add_column("Unit price", justify="right")
    detail_table.add_column("Amount", justify="right")

    for item in bill.items:
        detail_table.add_row(item.name, str(item.quantity), format_inr(item.price), format_inr(item.line_total))

    console.print(detail_table)
    console.print(f"  [bold]Total: {format_inr(bill.total_amount)}[/bold]")


def create_bill_menu(bill_service: BillService) -> Bill | None:
    console.print()
    console.print("[bold]New Bill[/bold]", style="cyan")

    form = BillForm()
    customer = questionary.text("Customer name:").ask()
    if not customer:
        console.print("[yellow]Cancelled.[/yellow]")
        return None
    form = apply_change(form, FieldChange(field=FormField.CUSTOMER_NAME, value=customer))
    form = apply_change(form, FieldChange(field=FormField.DATE, value=_ask_date("Date", form.date)))

    console.print()
    console.print("Add the bill items:")
    index = 0
    while True:
        candidate = _ask_item(form, index)
        if candidate is None:
            if index == 0:
                console.print("[yellow]Cancelled.[/yellow]")
                return None
            form = remove_item(form, index)
            break
        form = candidate
        console.print(f"  [green]Item added: {form.items[index].name}[/green]")
        if not questionary.confirm("Add another item?", default=False).ask():
            break
        form = add_item(form)
        index += 1

    errors = form_errors(form)
    if errors:
        for path, message in errors.items():
            console.print(f"[red]{path}: {message}[/red]")
        console.print("[yellow]Bill not created.[/yellow]")
        return None

    console.print(f"  Total: [bold]{format_inr(form.total)}[/bold]")
    try:
        bill = bill_service.new_bill(to_request(form))
    except BillbookError as exc:
        _report_error(exc)
        return None

    console.print("[green bold]Bill created![/green bold]")
    return bill


def export_invoice(bill: Bill, bill_service: BillService) -> Path | None:
    if bill.id is None:
        console.print("[red]Invalid bill.[/red]")
        return None
    try:
        invoice = bill_service.build_invoice(bill.id)
    except BillbookError as exc:
        _report_error(exc)
        return None
    path = Path(settings.invoice_output_path) / f"{invoice.number}.pdf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(invoice.pdf)
    console.print(f"[green]Invoice {invoice.number} saved to {path.resolve()}[/green]")
    return path


def list_bills_menu(bill_service: BillService, search: str | None = None) -> None:
    bills = bill_service.get_all_bills(search)

    if not bills:
        if search:
            console.print(f"[yellow]No bills match '{escape(search)}'.[/yellow]")
        else:
            console.print("[yellow]No bills yet.[/yellow]")
        return

    table = Table(title=f"Bills matching '{escape(search)}'" if search else "Bills")
    table.add_column("#", style="dim")
    table.add_column("Customer")
    table.add_column("Date")
    table.add_column("Total", justify="right")

    for b in bills:
        table.add_row(str(b.id), b.customer_name, b.date.isoformat() if b.date else "-", format_inr(b.total_amount))

    console.print()
    console.print(table)

    bill_choices = {f"{b.id} - {b.customer_name}": b for b in bills}
    choices = list(bill_choices.keys()) + ["Back"]
    choice = questionary.select("Select a bill:", choices=choices).ask()

    if choice is None or choice == "Back":
        return

    bill = bill_service.get_bill_by_id({"id": bill_choices[choice].id})
    if not bill:
        console.print("[red]Bill not found.[/red]")
        return

    _bill_detail_menu(bill, bill_service)


def search_bills_menu(bill_service: BillService) -> None:
    term = questionary.text("Customer name contains:").ask()
    if not term or not term.strip():
        console.print("[yellow]Cancelled.[/yellow]")
        return
    list_bills_menu(bill_service, search=term.strip())


def _bill_detail_menu(bill: Bill, bill_service: BillService) -> None:
    while True:
        console.print()
        console.print(f"[bold cyan]{bill.customer_name} - {bill.date}[/bold cyan]")
        _show_bill_detail(bill)
        console.print()

        action = questionary.select(
            "Actions:",
            choices=[
                "Add Items",
                "Replace Items",
                "Export Invoice",
                "Delete Bill",
                "Back",
            ],
        ).ask()

        if action is None or action == "Back":
            break
        try:
            if action == "Add Items":
                items = _ask_items()
                if items:
                    bill = bill_service.update_bill(
                        {"id": bill.id, "totalAmount": str(bill.total_amount), "items": items}
                    )
                    console.print("[green]Items added.[/green]")
            elif action == "Replace Items":
                items = _ask_items()
                if items:
                    bill = bill_service.replace_bill_items({"id": bill.id, "items": items})
                    console.print("[green]Items replaced.[/green]")
                else:
                    console.print("[yellow]No items given, nothing changed.[/yellow]")
            elif action == "Export Invoice":
                export_invoice(bill, bill_service)
            elif action == "Delete Bill":
                if questionary.confirm("Delete this bill?", default=False).ask():
                    bill_service.delete_bill({"id": bill.id})
                    console.print("[green]Bill deleted.[/green]")
                    break
        except BillbookError as exc:
            _report_error(exc)
            if isinstance(exc, NotFoundError):
                break
