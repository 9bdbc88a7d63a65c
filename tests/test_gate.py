"""Tests for the authorization checks"""

import pytest

from cms.auth.gate import (
    authorize_user_update,
    read_requires_session,
    require_role,
    require_session,
)
from cms.utils.exceptions import Forbidden, Unauthorized


def test_require_session(sessions, editor):
    token = sessions.create_session(editor.id)
    assert require_session(sessions, token).id == editor.id
    with pytest.raises(Unauthorized):
        require_session(sessions, None)
    with pytest.raises(Unauthorized):
        require_session(sessions, "bogus")


def test_require_role_exact_match(admin, editor):
    require_role(admin, "admin")
    require_role(editor, "editor")
    with pytest.raises(Forbidden):
        require_role(editor, "admin")
    # No hierarchy: admin is not an editor
    with pytest.raises(Forbidden):
        require_role(admin, "editor")


def test_self_password_change_allowed(editor):
    authorize_user_update(editor, editor, changes_password=True, changes_role=False)


def test_editor_cannot_change_other_password(admin, editor):
    with pytest.raises(Forbidden):
        authorize_user_update(editor, admin, changes_password=True, changes_role=False)


def test_role_change_requires_admin(admin, editor):
    with pytest.raises(Forbidden):
        authorize_user_update(editor, editor, changes_password=False, changes_role=True)
    authorize_user_update(admin, editor, changes_password=True, changes_role=True)


@pytest.mark.parametrize(
    "published, expected",
    [(True, False), (False, True), (None, True)],
)
def test_read_requires_session(published, expected):
    assert read_requires_session(published) is expected


def test_editor_cannot_update_other_user_at_all(admin, editor):
    with pytest.raises(Forbidden):
        authorize_user_update(editor, admin, changes_password=False, changes_role=False)
    authorize_user_update(admin, editor, changes_password=False, changes_role=False)
