from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from billbook.errors import ValidationError
from web.deps import get_bill_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bills")


async def _json_body(request: Request) -> Any:
    # ValueError covers both JSONDecodeError and a body that is not UTF-8
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError({"input": "Request body must be valid JSON"}) from exc


@router.post("/newBill")
async def new_bill(request: Request):
    payload = await _json_body(request)
    logger.info("POST newBill")
    bill = get_bill_service(request).new_bill(payload)
    return JSONResponse(bill.to_wire())


@router.post("/updateBill")
async def update_bill(request: Request):
    payload = await _json_body(request)
    logger.info("POST updateBill id=%s", payload.get("id") if isinstance(payload, dict) else None)
    bill = get_bill_service(request).update_bill(payload)
    return JSONResponse(bill.to_wire())


@router.post("/replaceBillItems")
async def replace_bill_items(request: Request):
    payload = await _json_body(request)
    logger.info("POST replaceBillItems id=%s", payload.get("id") if isinstance(payload, dict) else None)
    bill = get_bill_service(request).replace_bill_items(payload)
    return JSONResponse(bill.to_wire())


@router.post("/deleteBill")
async def delete_bill(request: Request):
    payload = await _json_body(request)
    logger.info("POST deleteBill id=%s", payload.get("id") if isinstance(payload, dict) else None)
    get_bill_service(request).delete_bill(payload)
    return Response(status_code=204)


@router.get("/getAllBills")
async def get_all_bills(request: Request):
    bills = get_bill_service(request).get_all_bills(request.query_params.get("search"))
    return JSONResponse([bill.to_wire() for bill in bills])


@router.get("/getBillById")
async def get_bill_by_id(request: Request):
    bill = get_bill_service(request).get_bill_by_id(dict(request.query_params))
    return JSONResponse(bill.to_wire() if bill else None)


@router.get("/{bill_id}/invoice.pdf")
async def bill_invoice(request: Request, bill_id: int):
    logger.info("GET invoice for bill %s", bill_id)
    invoice = get_bill_service(request).build_invoice(bill_id)
    return Response(
        content=invoice.pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{invoice.number}.pdf"',
            "X-Invoice-Number": invoice.number,
        },
    )
