"""
Daily record routes: per-day ledger CRUD, active cycle summary and history.

Routes:
    POST   /api/daily/record          - Record a day
    PUT    /api/daily/record/{id}     - Edit a day
    DELETE /api/daily/record/{id}     - Delete a day
    GET    /api/daily/records         - Days of the active billing cycle
    GET    /api/daily/monthly-summary - Totals of the active billing cycle
    GET    /api/daily/history         - Live totals and day list for any range
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from rider_expense.deps import get_billing_service, get_current_user_id, get_ledger_service
from rider_expense.logging_config import get_logger
from rider_expense.responses import success
from rider_expense.schemas import DailyRecordIn, record_out
from rider_expense.services.billing import (
    HISTORY_COMPONENTS,
    SUMMARY_COMPONENTS,
    BillingService,
    parse_include,
)
from rider_expense.services.ledger import LedgerService

# Module logger for daily record operations
logger = get_logger(__name__)

router = APIRouter()


@router.post("/record")
def create_daily_record(
    body: DailyRecordIn,
    user_id: int = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service),
):
    record = ledger.create(
        user_id, body.date, body.work_status,
        body.deliveries, body.tips, body.expenses, body.day_quality,
    )
    return success("Daily record created successfully", status_code=status.HTTP_201_CREATED, record=record_out(record))


@router.put("/record/{record_id}")
def edit_daily_record(
    record_id: int,
    body: DailyRecordIn,
    user_id: int = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service),
):
    record = ledger.edit(
        user_id, record_id, body.date, body.work_status,
        body.deliveries, body.tips, body.expenses, body.day_quality,
    )
    return success("Daily record updated successfully", record=record_out(record))


@router.delete("/record/{record_id}")
def delete_daily_record(
    record_id: int,
    user_id: int = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service),
):
    ledger.delete(user_id, record_id)
    return success("Daily record deleted successfully")


@router.get("/records")
def get_daily_records(user_id: int = Depends(get_current_user_id), ledger: LedgerService = Depends(get_ledger_service)):
    records = ledger.current_cycle_records(user_id)
    return success("Daily records fetched", records=[record_out(r) for r in records])


@router.get("/monthly-summary")
def get_monthly_summary(
    include: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    billing: BillingService = Depends(get_billing_service),
):
    components = parse_include(include, SUMMARY_COMPONENTS)
    cycle, summary = billing.monthly_summary(user_id, components)
    return success("Monthly summary fetched", summary=summary.to_dict(), cycle=cycle.to_dict())


@router.get("/history")
def get_history(
    from_date: Optional[str] = Query(None),
    to_date: Optional[str] = Query(None),
    include: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    billing: BillingService = Depends(get_billing_service),
):
    components = parse_include(include, HISTORY_COMPONENTS)
    summary, daily_records = billing.history(user_id, from_date, to_date, components)
    logger.debug(f"History {from_date} - {to_date} computed for user {user_id}")
    return success("History fetched", summary=summary.to_dict(), dailyRecords=daily_records)
