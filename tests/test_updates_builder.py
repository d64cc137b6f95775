"""
Unit tests for the partial-update builder.
"""

import pytest

from app.core.errors import BadRequestError
from app.crud import job as job_crud
from app.crud.updates import build_update
from app.models.job import Job


class TestBuildUpdate:

    def test_only_given_fields_are_set(self):
        stmt = build_update(Job, 7, {"title": "Fitter"}, job_crud.EDITABLE_FIELDS)
        compiled = stmt.compile()
        sql = str(compiled)

        assert sql.startswith("UPDATE jobs SET title=")
        assert "department" not in sql
        assert compiled.params["title"] == "Fitter"
        assert 7 in compiled.params.values()

    def test_values_are_bound_not_inlined(self):
        hostile = "x'; DROP TABLE jobs; --"
        compiled = build_update(Job, 1, {"department": hostile}, job_crud.EDITABLE_FIELDS).compile()

        assert hostile not in str(compiled)
        assert compiled.params["department"] == hostile

    def test_null_is_a_real_change(self):
        compiled = build_update(Job, 1, {"due_date": None}, job_crud.EDITABLE_FIELDS).compile()
        assert "due_date" in str(compiled)
        assert compiled.params["due_date"] is None

    def test_empty_changes_rejected(self):
        with pytest.raises(BadRequestError) as exc:
            build_update(Job, 1, {}, job_crud.EDITABLE_FIELDS)
        assert exc.value.code == "no_fields"

    def test_status_not_editable(self):
        with pytest.raises(BadRequestError) as exc:
            build_update(Job, 1, {"status": "Filled"}, job_crud.EDITABLE_FIELDS)
        assert exc.value.code == "field_not_editable"

    def test_unknown_column_rejected_even_if_whitelisted(self):
        with pytest.raises(BadRequestError) as exc:
            build_update(Job, 1, {"salary": 10}, {"salary"})
        assert exc.value.code == "field_not_editable"
