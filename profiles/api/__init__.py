from .viewsets import (
    EmergencyContactViewSet,
    GeneralInfoViewSet,
    IdentityDocumentViewSet,
    OwnedRecordViewSet,
    PersonViewSet,
    ProfileViewSet,
)

__all__ = [
    "EmergencyContactViewSet",
    "GeneralInfoViewSet",
    "IdentityDocumentViewSet",
    "OwnedRecordViewSet",
    "PersonViewSet",
    "ProfileViewSet",
]
