from billbook.repositories.base import BillRepository


def get_bill_repository() -> BillRepository:
    from billbook.db import get_connection
    from billbook.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())
