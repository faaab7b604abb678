"""
Services module - business logic between the routes and the database.

- analytics_service: status breakdowns, time buckets, conversion rates, follow-ups
- submission_service: consultants, vendors, submissions, interviews
- user_service: admin user management
- report_service: period reports rendered to HTML
- email_client: SMTP channel
- scheduler: calendar triggers for reports
"""
