"""
Consultant Placement Tracker
An ATS-lite for staffing teams: consultants, vendors, submissions, interviews.

Architecture:
- PostgreSQL: All structured data (users, consultants, vendors, submissions, interviews)
- Analytics: Status breakdowns, time-bucketed trends, conversion rates, follow-up reminders
- Reports: HTML submission reports emailed on a daily/weekly/monthly schedule
"""

__version__ = "1.0.0"
