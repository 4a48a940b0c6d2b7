from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from climate.ingest import read_table_file, upsert_rows
from climate.parameters import PARAMETERS


class Command(BaseCommand):
    help = "Import a CSV/XLSX file of station-month rows into one climate parameter table."

    def add_arguments(self, parser):
        parser.add_argument(
            "parameter",
            choices=sorted(PARAMETERS),
            help="Parameter slug, e.g. rainfall or maximum-temp",
        )
        parser.add_argument("path", type=str, help="Path to the .csv or .xlsx file")

    def handle(self, *args, **options):
        parameter = PARAMETERS[options["parameter"]]
        file_path = Path(options["path"])
        if not file_path.exists():
            raise CommandError(f"File not found: {file_path}")

        try:
            with file_path.open("rb") as handle:
                rows = read_table_file(handle, file_path.name)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        if not rows:
            raise CommandError(f"No rows found in {file_path}")

        results = upsert_rows(parameter.model, rows)

        for failure in results.failed_details:
            self.stderr.write(f"Row {failure['row']}: {failure['error']}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Imported {file_path.name} into {parameter.slug}: "
                f"total={results.total}, created={results.successful}, "
                f"updated={results.updated}, failed={results.failed}"
            )
        )
