from .token_service import next_token, current_token, reset_counter

from .visit_service import (
    register_visit,
    attach_prescription,
    attach_billing,
    get_prescription,
    get_bill,
    list_patient_visits,
    list_patient_prescriptions,
    list_patient_bills,
    list_pending_visits,
    list_unbilled_visits,
    billing_summary,
)

from .patient_service import (
    register_patient,
    list_patients,
    get_patient,
    patient_history,
    search_patients,
)

__all__ = [
    # Token Services
    "next_token",
    "current_token",
    "reset_counter",
    # Visit Services
    "register_visit",
    "attach_prescription",
    "attach_billing",
    "get_prescription",
    "get_bill",
    "list_patient_visits",
    "list_patient_prescriptions",
    "list_patient_bills",
    "list_pending_visits",
    "list_unbilled_visits",
    "billing_summary",
    # Patient Services
    "register_patient",
    "list_patients",
    "get_patient",
    "patient_history",
    "search_patients",
]
