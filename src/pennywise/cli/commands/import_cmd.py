"""CSV import commands."""

import click
from pennywise.cli.account_resolution import resolve_account_or_exit
from pennywise.cli.error_handling import handle_domain_error
from pennywise.domain.account import AccountService
from pennywise.domain.csv_import import CSVImportService
from pennywise.domain.entities import ColumnMapping, Direction
from pennywise.domain.errors import DomainError


def _print_mapping(mapping: ColumnMapping) -> None:
    for field_name, header in mapping.as_dict().items():
        click.echo(f"  {field_name:<14} <- {header}")


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--default-type",
    type=click.Choice([d.value for d in Direction], case_sensitive=False),
    help="Type for rows without a type column or negative amount (default: DEBIT)",
)
@click.option(
    "--type-authoritative",
    is_flag=True,
    help="Let a non-blank type column decide even when the amount is signed",
)
@click.option("--no-rules", is_flag=True, help="Do not run categorization rules")
@click.option("--date-column", help="Header of the date column")
@click.option("--amount-column", help="Header of the amount column")
@click.option("--description-column", help="Header of the description column")
@click.option("--type-column", help="Header of the credit/debit column")
@click.pass_context
def import_csv(
    ctx,
    csv_file: str,
    account: str,
    default_type: str | None,
    type_authoritative: bool,
    no_rules: bool,
    date_column: str | None,
    amount_column: str | None,
    description_column: str | None,
    type_column: str | None,
):
    """Import transactions from a CSV file.

    Columns are detected from the header row. Any --*-column option
    replaces the detected column for that field only.

    Examples:
        pennywise import statement.csv --account Checking
        pennywise import export.csv --account 2 --default-type CREDIT --no-rules
        pennywise import bank.csv --account 1 --date-column Booked --amount-column EUR --description-column Text
    """
    db = ctx.obj["db"]
    service = CSVImportService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    overrides = {
        "date": date_column,
        "amount": amount_column,
        "description": description_column,
        "type": type_column,
    }

    try:
        result = service.import_csv(
            csv_file_path=csv_file,
            account_id=account_id,
            column_overrides={k: v for k, v in overrides.items() if v},
            default_direction=Direction.parse(default_type) if default_type else None,
            type_column_authoritative=type_authoritative,
            apply_rules=not no_rules,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("\nColumn mapping:")
    _print_mapping(result["mapping"])
    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} transactions")
    click.echo(f"  Categorized: {result['categorized']}")
    click.echo(f"  Balance change: {result['balance_change']:+,.2f}")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


@click.command("detect-columns")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def detect_columns(ctx, csv_file: str):
    """Show which columns an import of CSV_FILE would use."""
    service = CSVImportService(ctx.obj["db"])

    try:
        headers, mapping = service.detect_columns_in_file(csv_file)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Columns: {', '.join(headers)}")
    click.echo("Detected mapping:")
    _print_mapping(mapping)
    missing = mapping.missing_required()
    if missing:
        click.echo(f"Missing required: {', '.join(missing)}")


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_csv)
    cli.add_command(detect_columns)
