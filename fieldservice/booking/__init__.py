from fieldservice.booking.address import AddressResolution, StaticAddressResolver
from fieldservice.booking.form_state import (
    BookingFormStateMachine,
    FormState,
    FormTrigger,
)
from fieldservice.booking.public_form import PublicBookingForm, SubmissionResult

__all__ = [
    "BookingFormStateMachine",
    "FormState",
    "FormTrigger",
    "PublicBookingForm",
    "SubmissionResult",
    "AddressResolution",
    "StaticAddressResolver",
]
