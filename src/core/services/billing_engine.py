"""
Billing and dispensing engine.

Turns a list of requested batch lines into a committed sale:
validation, schedule compliance, GST pricing, invoice numbering and
the atomic stock decrement. Every business-rule failure is raised
before anything is written; failures inside the write phase roll the
whole transaction back.

NO infrastructure imports - depends only on core entities, interfaces, exceptions.
"""

from collections import defaultdict
from collections.abc import Callable
from contextlib import nullcontext
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from src.config import get_logger
from src.core.entities.audit import AuditAction
from src.core.entities.compliance import ComplianceResult
from src.core.entities.medicine import Batch, Medicine
from src.core.entities.prescription import Prescription
from src.core.entities.sale import (
    PaymentMethod,
    Sale,
    SaleItem,
    SaleLineInput,
    SalesReport,
    SaleState,
)
from src.core.exceptions import (
    BatchMismatchError,
    BatchNotFoundError,
    ComplianceViolationError,
    EmptySaleError,
    MedicineNotFoundError,
    PrescriptionNotFoundError,
    SaleNotFoundError,
    ValidationError,
)
from src.core.interfaces import (
    IBatchStore,
    IMedicineStore,
    IPrescriptionStore,
    ISalesStore,
    TransactionFactory,
)
from src.core.services.audit_recorder import AuditRecorderService
from src.core.services.billing_math import HUNDRED, D, money2
from src.core.services.compliance import (
    PRESCRIPTION_VALIDITY_DAYS,
    gst_rate_for,
    is_prescription_valid,
    validate_dispense,
)

logger = get_logger(__name__)


def format_invoice_number(prefix: str, day: date, sequence: int) -> str:
    """
    Invoice numbers read PREFIX + YYMMDD + 4-digit daily sequence.

    The sequence restarts every day, so the date segment carries the day:
    a YYMM segment would repeat numbers within a month.
    """
    return f"{prefix}{day:%y%m%d}{sequence:04d}"


def price_sale(
    lines: list[tuple[SaleLineInput, Medicine, Batch]],
    discount_percent: Decimal,
) -> tuple[list[SaleItem], dict[str, Decimal]]:
    """
    Price resolved lines.

    Line subtotal is MRP x quantity, line tax is subtotal x rate / 100.
    The discount applies to the aggregate subtotal and reduces the
    aggregate tax by the same percentage.

    Returns:
        Tuple of (sale items, totals dict)
    """
    items: list[SaleItem] = []
    subtotal = Decimal("0")
    total_tax = Decimal("0")

    for line, medicine, batch in lines:
        rate = gst_rate_for(medicine.hsn_code)
        unit_price = D(batch.mrp)
        line_subtotal = unit_price * line.quantity
        line_tax = line_subtotal * rate / HUNDRED

        items.append(
            SaleItem(
                medicine_id=medicine.id,
                batch_id=batch.id,
                quantity=line.quantity,
                unit_price=money2(unit_price),
                gst_rate=rate,
                total=money2(line_subtotal + line_tax),
            )
        )
        subtotal += line_subtotal
        total_tax += line_tax

    discount = D(discount_percent)
    discount_amount = money2(subtotal * discount / HUNDRED)
    final_subtotal = money2(subtotal) - discount_amount
    final_tax = money2(total_tax * (HUNDRED - discount) / HUNDRED)

    totals = {
        "subtotal": money2(subtotal),
        "discount_amount": discount_amount,
        "gst_amount": final_tax,
        "total_amount": money2(final_subtotal + final_tax),
    }
    return items, totals


class BillingEngine:
    """
    Sale creation and dispensing compliance.

    Required interfaces for DI:
    - IMedicineStore, IBatchStore: line resolution and stock decrement
    - IPrescriptionStore: prescription lookups for scheduled medicines
    - ISalesStore: invoice sequence allocation and sale persistence
    - TransactionFactory: unit of work spanning all stores in the commit
    - AuditRecorderService: optional post-commit audit trail
    """

    DEFAULT_INVOICE_PREFIX = "INV"

    def __init__(
        self,
        medicine_store: IMedicineStore,
        batch_store: IBatchStore,
        prescription_store: IPrescriptionStore,
        sales_store: ISalesStore,
        transaction: TransactionFactory | None = None,
        audit_recorder: AuditRecorderService | None = None,
        invoice_prefix: str | None = None,
        enforce_compliance: bool = True,
        clock: Callable[[], datetime] | None = None,
    ):
        self._medicines = medicine_store
        self._batches = batch_store
        self._prescriptions = prescription_store
        self._sales = sales_store
        self._transaction = transaction or nullcontext
        self._audit = audit_recorder
        self._invoice_prefix = invoice_prefix or self.DEFAULT_INVOICE_PREFIX
        self._enforce_compliance = enforce_compliance
        self._clock = clock or datetime.now

    async def create_sale(
        self,
        items: list[SaleLineInput],
        actor_id: str,
        discount_percent: Decimal | float = 0,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        prescription_id: str | None = None,
        customer_name: str | None = None,
        source_ip: str | None = None,
    ) -> Sale:
        """
        Create a sale and decrement the chosen batches atomically.

        Raises:
            EmptySaleError: No line items
            ValidationError: Discount out of range or unsellable batch
            MedicineNotFoundError, BatchNotFoundError, PrescriptionNotFoundError
            BatchMismatchError: Batch belongs to another medicine
            ComplianceViolationError: A schedule rule rejected a medicine
            InsufficientStockError: A batch holds less than requested
        """
        sale_id = str(uuid4())
        state = SaleState.VALIDATING
        self._log_transition(sale_id, None, state)

        try:
            if not items:
                raise EmptySaleError()

            discount = D(discount_percent)
            if discount < 0 or discount > HUNDRED:
                raise ValidationError(
                    "discount", "Discount must be between 0 and 100", discount_percent
                )

            now = self._clock()
            prescription = await self._load_prescription(prescription_id)
            lines = await self._resolve_lines(items, now.date())

            if self._enforce_compliance:
                self._check_sale_compliance(lines, prescription, now)

            state = self._advance(sale_id, state, SaleState.PRICING)
            sale_items, totals = price_sale(lines, discount)

            state = self._advance(sale_id, state, SaleState.ALLOCATING)
            async with self._transaction():
                sequence = await self._sales.next_invoice_sequence(now.strftime("%Y-%m-%d"))
                sale = Sale(
                    id=sale_id,
                    invoice_number=format_invoice_number(
                        self._invoice_prefix, now.date(), sequence
                    ),
                    prescription_id=prescription_id,
                    customer_name=customer_name,
                    items=sale_items,
                    discount_percent=discount,
                    payment_method=payment_method,
                    created_by=actor_id,
                    created_at=now,
                    **totals,
                )
                await self._sales.create_sale(sale)

                for item in sale.items:
                    await self._batches.decrement_quantity(item.batch_id, item.quantity)

        except Exception:
            self._advance(sale_id, state, SaleState.ABORTED)
            raise

        self._advance(sale_id, state, SaleState.COMMITTED)
        logger.info(
            "sale_created",
            sale_id=sale_id,
            invoice_number=sale.invoice_number,
            items=len(sale.items),
            total=str(sale.total_amount),
        )

        created = await self.get_sale(sale_id)

        if self._audit is not None:
            self._audit.record(
                AuditAction.SALE_CREATE,
                entity_type="Sale",
                entity_id=sale_id,
                actor_id=actor_id,
                details={
                    "invoice_number": created.invoice_number,
                    "total_amount": str(created.total_amount),
                    "items": len(created.items),
                    "prescription_id": prescription_id,
                },
                source_ip=source_ip,
            )

        return created

    async def validate_dispensing(
        self,
        medicine_id: str,
        quantity: int,
        prescription_id: str | None = None,
    ) -> ComplianceResult:
        """
        Dry-run compliance check for one medicine.

        The referenced prescription's own doctor_verified flag decides
        verification, and an expired prescription is rejected.
        """
        if quantity <= 0:
            raise ValidationError("quantity", "Quantity must be positive", quantity)

        medicine = await self._medicines.get_medicine(medicine_id)
        if medicine is None:
            raise MedicineNotFoundError(medicine_id)

        prescription = await self._load_prescription(prescription_id)
        return self._compliance_for(medicine, quantity, prescription, self._clock())

    async def get_sale(self, sale_id: str) -> Sale:
        """Get a sale with medicine, batch and prescription references attached."""
        sale = await self._sales.get_sale(sale_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)
        return await self._attach_references(sale)

    async def list_sales(
        self,
        limit: int = 20,
        offset: int = 0,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Sale]:
        return await self._sales.list_sales(limit=limit, offset=offset, start=start, end=end)

    async def sales_report(
        self, start: date | None = None, end: date | None = None
    ) -> SalesReport:
        if start and end and start > end:
            raise ValidationError("startDate", "Start date must not be after end date", start)
        return await self._sales.sales_report(start, end)

    # Internals

    async def _load_prescription(self, prescription_id: str | None) -> Prescription | None:
        if not prescription_id:
            return None
        prescription = await self._prescriptions.get_prescription(prescription_id)
        if prescription is None:
            raise PrescriptionNotFoundError(prescription_id)
        return prescription

    async def _resolve_lines(
        self, items: list[SaleLineInput], today: date
    ) -> list[tuple[SaleLineInput, Medicine, Batch]]:
        resolved = []
        for line in items:
            medicine = await self._medicines.get_medicine(line.medicine_id)
            if medicine is None:
                raise MedicineNotFoundError(line.medicine_id)

            batch = await self._batches.get_batch(line.batch_id)
            if batch is None:
                raise BatchNotFoundError(line.batch_id)

            if batch.medicine_id != medicine.id:
                raise BatchMismatchError(batch.id, medicine.id)

            if not batch.is_active or batch.is_expired(today):
                raise ValidationError(
                    "batchId",
                    f"Batch {batch.batch_number} is expired or inactive",
                    batch.id,
                )

            resolved.append((line, medicine, batch))
        return resolved

    def _check_sale_compliance(
        self,
        lines: list[tuple[SaleLineInput, Medicine, Batch]],
        prescription: Prescription | None,
        now: datetime,
    ) -> None:
        quantities: dict[str, int] = defaultdict(int)
        medicines: dict[str, Medicine] = {}
        for line, medicine, _batch in lines:
            quantities[medicine.id] += line.quantity
            medicines[medicine.id] = medicine

        for medicine_id, quantity in quantities.items():
            result = self._compliance_for(
                medicines[medicine_id], quantity, prescription, now
            )
            if not result.allowed:
                raise ComplianceViolationError(medicine_id, result.errors, result.warnings)

    @staticmethod
    def _compliance_for(
        medicine: Medicine,
        quantity: int,
        prescription: Prescription | None,
        now: datetime,
    ) -> ComplianceResult:
        schedule = medicine.schedule_type
        result = validate_dispense(
            schedule,
            has_prescription=prescription is not None,
            doctor_verified=prescription.doctor_verified if prescription else False,
            quantity=quantity,
        )

        if prescription is not None and not is_prescription_valid(
            prescription.prescription_date, schedule, now
        ):
            result.errors.append(
                f"Prescription has expired for Schedule {schedule.value} "
                f"(valid for {PRESCRIPTION_VALIDITY_DAYS[schedule]} days)"
            )
            result.allowed = False

        return result

    async def _attach_references(self, sale: Sale) -> Sale:
        medicines: dict[str, Medicine | None] = {}
        for item in sale.items:
            if item.medicine_id not in medicines:
                medicines[item.medicine_id] = await self._medicines.get_medicine(
                    item.medicine_id
                )
            item.medicine = medicines[item.medicine_id]
            item.batch = await self._batches.get_batch(item.batch_id)

        if sale.prescription_id:
            sale.prescription = await self._prescriptions.get_prescription(
                sale.prescription_id
            )
        return sale

    def _advance(self, sale_id: str, current: SaleState, target: SaleState) -> SaleState:
        self._log_transition(sale_id, current, target)
        return target

    @staticmethod
    def _log_transition(
        sale_id: str, current: SaleState | None, target: SaleState
    ) -> None:
        log = logger.warning if target == SaleState.ABORTED else logger.debug
        log(
            "sale_state_changed",
            sale_id=sale_id,
            from_state=current.value if current else None,
            to_state=target.value,
        )
