from ehub.services.user_mapper import map_user_from_backend, map_users_from_backend


def test_snake_case_fields_are_renamed():
    raw = {
        "id": "u-1",
        "name": "Ana",
        "email": "ana@ehub.test",
        "role": "fabricator",
        "school": "North Campus",
        "secure_id": "FABID-AB12CD34",
        "employee_number": "EMP260042",
        "phone": "0917",
        "gcash_number": "0918",
        "client_project_id": None,
    }
    user = map_user_from_backend(raw)
    assert user.secure_id == "FABID-AB12CD34"
    assert user.employee_number == "EMP260042"
    assert user.gcash_number == "0918"
    assert user.model_dump(by_alias=True)["secureId"] == "FABID-AB12CD34"


def test_missing_optional_fields_stay_none():
    user = map_user_from_backend({"id": "c-1", "name": "Client", "email": "c@x.test", "role": "client"})
    assert user.employee_number is None
    assert user.gcash_number is None
    assert user.client_project_id is None


def test_no_coercion_or_camel_fallback():
    user = map_user_from_backend({"id": 7, "secureId": "SUPID-XXXXXXXX"})
    assert user.id == 7
    assert user.secure_id is None
    assert user.name is None


def test_map_users_from_backend():
    assert map_users_from_backend(None) == []
    users = map_users_from_backend([{"id": "a"}, {"id": "b"}])
    assert [u.id for u in users] == ["a", "b"]
