from .dto import (
    ClientCreateIn,
    ClientListIn,
    ClientOut,
    ClientUpdateIn,
    ProfileOut,
    ProfilePhotoIn,
    ProfileUpsertIn,
)
from .profile import ProfileService, profile_to_out
from .service import ClientService, client_to_out

__all__ = [
    "ClientService",
    "ProfileService",
    "client_to_out",
    "profile_to_out",
    "ClientCreateIn",
    "ClientListIn",
    "ClientOut",
    "ClientUpdateIn",
    "ProfileOut",
    "ProfilePhotoIn",
    "ProfileUpsertIn",
]
