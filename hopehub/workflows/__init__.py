"""
User-facing workflows: request submission and donation pledges.
"""

from .pledges import (
    DonationForm,
    count_donations,
    list_donations,
    load_donations_for,
    sort_donations,
    submit_donation,
)
from .result import WorkflowResult
from .submission import RequestForm, submit_request, validate_request_form

__all__ = [
    'DonationForm',
    'RequestForm',
    'WorkflowResult',
    'count_donations',
    'list_donations',
    'load_donations_for',
    'sort_donations',
    'submit_donation',
    'submit_request',
    'validate_request_form',
]
