"""
Daily climate parameter tables (rainfall, temperatures, humidity, ...).

Every parameter has its own table with one row per station-month and one
column per day. The app exposes the same set of endpoints for each of them:
bulk upload, filtered/paginated listing, CRUD, chart series and exports.
"""
