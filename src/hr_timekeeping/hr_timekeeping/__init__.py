"""HR timekeeping package.

Feature modules (shifts, attendance, reports, payroll, leaves) keep their
business rules in plain services and calculators; Flask controllers and MySQL
repositories are thin layers around them.
"""
