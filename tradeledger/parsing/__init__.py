"""Parsing package for CSV ingestion and date handling."""

from .headers import normalize_header
from .date_parser import parse_transaction_date
from .year_inference import RowOrder, infer_years
from .price_parser import parse_price_to_cents
from .validator import validate_row
from .pipeline import validate_and_convert
from .csv_parser import read_csv_rows, parse_transactions_csv, parse_csv_file
