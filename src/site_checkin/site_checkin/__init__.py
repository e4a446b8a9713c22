"""Site Check-in package.

Feature modules (accounts, workers, sites, grants, attendance, ...) each hold
a domain model, a repository interface with its MySQL implementation, a
service and a thin Flask controller.
"""
