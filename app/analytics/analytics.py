# app/analytics/analytics.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from app.Shared.dependencies import get_db
import app.user.user as _user_auth
from app.user.models import User

import app.analytics.schema as _schemas
import app.analytics.service as _services
import app.product.service as _product_services
from app.core.errors import Forbidden

router = APIRouter()

@router.get("/dashboard", response_model=_schemas.CreatorAnalytics, tags=["ANALYTICS API"])
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.creator_analytics(db, current_user.id)

@router.get("/trends", response_model=List[_schemas.MonthlyTrend], tags=["ANALYTICS API"])
def get_trends(
    months: int = Query(6, ge=1, le=24),
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.monthly_trends(db, current_user.id, months)

@router.get("/product/{product_id}", response_model=_schemas.ProductAnalytics, tags=["ANALYTICS API"])
def get_product_analytics(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    product = _product_services.get_product_or_404(db, product_id)
    if product.creator_id != current_user.id and not current_user.is_admin:
        raise Forbidden("Not your product")
    return _services.product_analytics(db, product_id)

@router.get("/earnings", response_model=_schemas.EarningsSummary, tags=["ANALYTICS API"])
def get_earnings(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.earnings_summary(db, current_user.id)

@router.get("/stats", response_model=_schemas.CreatorStats, tags=["ANALYTICS API"])
def get_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.creator_stats(db, current_user.id)
