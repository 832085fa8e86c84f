from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from merrycream.time_utils import to_iso_date


class Invoice(db.Model):
    """
    One delivery to one store.

    Money is kept in integer cents; price_per_cup and total are derived.
    invoice_number is the uniqueness key and also names the PDF on disk.
    """
    __tablename__ = "invoices"
    __table_args__ = (
        db.CheckConstraint("cups_delivered >= 0", name="ck_invoices_cups_non_negative"),
        db.CheckConstraint("price_per_cup_cents >= 0", name="ck_invoices_price_non_negative"),
        db.Index("ix_invoices_date_store", "date", "store_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.String(64), nullable=False, unique=True)
    date = db.Column(db.Date, nullable=False, index=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)
    cups_delivered = db.Column(db.Integer, nullable=False)
    price_per_cup_cents = db.Column(db.Integer, nullable=False)
    is_paid = db.Column(db.Boolean, nullable=False, default=False, server_default="0")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    store = db.relationship("Store", backref=db.backref("invoices", lazy=True))

    @property
    def price_per_cup(self) -> Decimal:
        return Decimal(self.price_per_cup_cents) / 100

    @property
    def total_cents(self) -> int:
        return self.cups_delivered * self.price_per_cup_cents

    @property
    def total(self) -> Decimal:
        return Decimal(self.total_cents) / 100

    def __repr__(self) -> str:
        return f"<Invoice id={self.id} number={self.invoice_number!r} store_id={self.store_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "invoice_number": self.invoice_number,
            "date": to_iso_date(self.date),
            "store_id": self.store_id,
            "cups_delivered": self.cups_delivered,
            "price_per_cup": float(self.price_per_cup),
            "is_paid": self.is_paid,
        }
