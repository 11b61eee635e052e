from sqlalchemy import inspect
from sqlalchemy.orm import configure_mappers

from fleetops.models import User


def test_mappers_configure():
    configure_mappers()


def test_user_roles_join_on_user_id():
    relationship = inspect(User).relationships["user_roles"]
    assert [(local.name, remote.name) for local, remote in relationship.local_remote_pairs] == [("id", "user_id")]
