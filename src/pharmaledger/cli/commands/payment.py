"""Customer payment commands."""

import click
from pharmaledger.cli.date_filters import resolve_cli_date_range
from pharmaledger.cli.error_handling import handle_domain_error
from pharmaledger.domain.entities import AllocationTarget, NewPaymentAllocation
from pharmaledger.domain.errors import DomainError, StorageError
from pharmaledger.domain.payment import PaymentService
from pharmaledger.domain.posting import PostingService
from pharmaledger.utils.amount_parser import parse_amount
from pharmaledger.utils.date_parser import parse_date

TARGET_TYPES = [t.value for t in AllocationTarget]


def _parse_allocation(ctx, raw: str, target_type: str) -> NewPaymentAllocation:
    """Parse TARGET_ID:AMOUNT into a NewPaymentAllocation."""
    target, _, amount = raw.partition(":")
    try:
        return NewPaymentAllocation(
            target_id=int(target),
            allocated_amount=parse_amount(amount),
            target_type=AllocationTarget(target_type),
        )
    except ValueError as e:
        click.echo(f"Error: Invalid allocation '{raw}'. Expected TARGET_ID:AMOUNT ({e})", err=True)
        ctx.exit(1)


@click.group()
def payment_group():
    """Record customer payments and allocate them."""
    pass


@payment_group.command("create")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID")
@click.option("--date", "payment_date", required=True, help="Payment date (YYYY-MM-DD or 'today')")
@click.option("--amount", required=True, help="Payment amount (e.g., 1500.00)")
@click.option("--reference", help="Cheque or transfer reference")
@click.option("--method", "payment_method", help="Payment method (cash, bank transfer, ...)")
@click.option(
    "--allocate",
    "allocations",
    multiple=True,
    help="Allocation as TARGET_ID:AMOUNT (repeat for each target)",
)
@click.option(
    "--target-type",
    type=click.Choice(TARGET_TYPES, case_sensitive=False),
    default=AllocationTarget.INVOICE.value,
    show_default=True,
    help="Kind of document the allocations settle",
)
@click.option("--post", is_flag=True, help="Also post the payment to the ledger (Dr cash / Cr receivables)")
@click.pass_context
def create_payment(
    ctx,
    customer_id: int,
    payment_date: str,
    amount: str,
    reference: str | None,
    payment_method: str | None,
    allocations: tuple[str, ...],
    target_type: str,
    post: bool,
):
    """Record a customer payment.

    Examples:
        pharmaledger payment create --customer 7 --date 2025-03-01 --amount 1000
        pharmaledger payment create --customer 7 --date today --amount 1000 --allocate 12:600 --allocate 13:400
    """
    db = ctx.obj["db"]
    service = PaymentService(db)

    try:
        parsed_date = parse_date(payment_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    new_allocations = [_parse_allocation(ctx, raw, target_type.lower()) for raw in allocations]

    try:
        with db.transaction():
            payment = service.create_customer_payment(
                customer_id=customer_id,
                payment_date=parsed_date,
                amount=parsed_amount,
                reference=reference,
                payment_method=payment_method,
                allocations=new_allocations,
            )
            entry = PostingService(db).post_customer_payment(payment.id) if post else None
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded payment {payment.id} of {payment.amount:,.2f} from customer {customer_id}")
    if new_allocations:
        click.echo(f"Allocated {len(new_allocations)} target(s)")
    if entry is not None:
        click.echo(f"Posted as journal entry {entry.entry_number}")


@payment_group.command("allocate")
@click.argument("payment_id", type=int)
@click.argument("target_id", type=int)
@click.argument("amount")
@click.option(
    "--type",
    "target_type",
    type=click.Choice(TARGET_TYPES, case_sensitive=False),
    default=AllocationTarget.INVOICE.value,
    show_default=True,
    help="Kind of document the allocation settles",
)
@click.pass_context
def allocate_payment(ctx, payment_id: int, target_id: int, amount: str, target_type: str):
    """Allocate part of a payment to an invoice or journal entry."""
    service = PaymentService(ctx.obj["db"])

    try:
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        service.create_payment_allocation(
            payment_id=payment_id,
            target_id=target_id,
            allocated_amount=parsed_amount,
            target_type=target_type,
        )
        remaining = service.get_unallocated_amount(payment_id)
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Allocated {parsed_amount:,.2f} of payment {payment_id} to {target_type.lower()} {target_id} "
        f"({remaining:,.2f} unallocated)"
    )


@payment_group.command("list")
@click.option("--customer", "customer_id", type=int, help="Only list payments of this customer")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def list_payments(ctx, customer_id: int | None, start_date: str | None, end_date: str | None):
    """List customer payments, newest first."""
    service = PaymentService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags={}
    )

    payments = service.get_customer_payments(customer_id=customer_id, date_from=start, date_to=end)
    if not payments:
        click.echo("No payments found.")
        return

    click.echo(f"{'ID':>5} {'Date':10s} {'Customer':>8s} {'Amount':>14s} {'Unallocated':>14s}")
    click.echo("-" * 60)
    for p in payments:
        unallocated = service.get_unallocated_amount(p.id)
        click.echo(
            f"{p.id:5d} {p.payment_date.isoformat():10s} {p.customer_id:8d} "
            f"{p.amount:>14,.2f} {unallocated:>14,.2f}"
        )


@payment_group.command("show")
@click.argument("payment_id", type=int)
@click.pass_context
def show_payment(ctx, payment_id: int):
    """Show a payment and its allocations."""
    service = PaymentService(ctx.obj["db"])
    try:
        payment = service.require_customer_payment(payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Payment:     {payment.id}")
    click.echo(f"Customer:    {payment.customer_id}")
    click.echo(f"Date:        {payment.payment_date}")
    click.echo(f"Amount:      {payment.amount:,.2f}")
    if payment.reference:
        click.echo(f"Reference:   {payment.reference}")
    if payment.payment_method:
        click.echo(f"Method:      {payment.payment_method}")

    allocations = service.get_payment_allocations(payment_id)
    if allocations:
        click.echo("\nAllocations:")
        for a in allocations:
            click.echo(f"  {a.target_type.value:13s} {a.target_id:6d} {a.allocated_amount:>14,.2f}")
    click.echo(f"Unallocated: {service.get_unallocated_amount(payment_id):,.2f}")


@payment_group.command("delete")
@click.argument("payment_id", type=int)
@click.pass_context
def delete_payment(ctx, payment_id: int):
    """Delete a payment together with its allocations."""
    service = PaymentService(ctx.obj["db"])
    try:
        service.delete_customer_payment(payment_id)
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted payment {payment_id}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
