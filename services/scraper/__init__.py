"""
Scraper module for fetching and processing the Karlsruhe waste calendar

Structure:
- core/     - fetch, parse and validate (no calendar knowledge)
- main.py   - address -> collection events
"""
