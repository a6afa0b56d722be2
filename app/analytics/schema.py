# app/analytics/schema.py
from decimal import Decimal
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime

from app.order.schema import OrderOut
from app.product.schema import ProductOut

class RevenueStats(BaseModel):
    total: Decimal = Decimal("0.00")
    this_month: Decimal = Decimal("0.00")
    last_month: Decimal = Decimal("0.00")
    growth: float = 0.0

class OrderStats(BaseModel):
    total: int = 0
    this_month: int = 0
    last_month: int = 0
    growth: float = 0.0

class TopProduct(BaseModel):
    id: int
    title: str
    sales: int
    revenue: Decimal

class ProductStats(BaseModel):
    total: int = 0
    active: int = 0
    top_selling: List[TopProduct] = []

class CustomerStats(BaseModel):
    total: int = 0
    returning: int = 0
    new_this_month: int = 0

class TrafficStats(BaseModel):
    conversion_rate: float = 0.0
    avg_order_value: Decimal = Decimal("0.00")

class Activity(BaseModel):
    type: str
    timestamp: datetime
    description: str
    amount: Optional[Decimal] = None

class CreatorAnalytics(BaseModel):
    revenue: RevenueStats
    orders: OrderStats
    products: ProductStats
    customers: CustomerStats
    traffic: TrafficStats
    recent_activity: List[Activity]

class MonthlyTrend(BaseModel):
    month: str
    revenue: Decimal
    orders: int
    customers: int

class ProductSales(BaseModel):
    total: int
    revenue: Decimal
    avg_price: Decimal

class ProductAnalytics(BaseModel):
    product: ProductOut
    sales: ProductSales
    conversion: Dict[str, int]
    recent_sales: List[OrderOut]

class EarningsSummary(BaseModel):
    total: Decimal
    this_month: Decimal

class CreatorStats(BaseModel):
    total_orders: int
    total_products: int
    total_members: int
