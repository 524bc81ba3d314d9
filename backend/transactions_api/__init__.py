"""
Transactions backend package.

Routers are grouped by domain area:
- transactions: CSV import, Excel export, date-range queries (local and user time zone)

Services hold the logic the routers call:
- timezones: Etc/GMT normalization, zone resolution, local-time conversion, coordinate lookup
- range_filter: date-range selection and ordering
- csv_import / excel_export: file formats
- store: upsert and queries against the transactions table
"""
