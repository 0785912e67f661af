"""OnDuty Pro package.

Organized by feature modules (users, requests) with a thin Flask API layer
on top of service/repository layers. The request lifecycle rules live in
``onduty.requests.lifecycle`` and know nothing about storage.
"""
