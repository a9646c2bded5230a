"""LGU HRIS package.

Feature modules (employees, media, dtr, biometrics, machines, attendance,
payroll, users) each keep a thin Flask controller over service and
repository layers. Personnel records live in the HR201 MySQL database,
time records and device data in the DTR MSSQL database.
"""
