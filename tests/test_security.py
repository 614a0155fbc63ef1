from app.backend.core.security import ensure_aware, hash_password, new_code_id, verify_password


def test_hash_is_salted_and_verifiable():
    first = hash_password("Secret1")
    second = hash_password("Secret1")

    assert first != second
    assert first != "Secret1"
    assert verify_password("Secret1", first)
    assert verify_password("Secret1", second)


def test_verify_rejects_wrong_password_and_unknown_digest():
    digest = hash_password("Secret1")

    assert not verify_password("secret1", digest)
    assert not verify_password("Secret1", "not-a-known-hash")
    assert not verify_password("Secret1", "")


def test_code_ids_are_short_and_unique():
    ids = {new_code_id() for _ in range(200)}

    assert len(ids) == 200
    assert all(1 <= len(i) <= 25 for i in ids)


def test_ensure_aware_assumes_utc_for_naive_values():
    from datetime import datetime, timezone

    naive = datetime(2026, 1, 1, 12, 0, 0)

    assert ensure_aware(naive).tzinfo is timezone.utc
    assert ensure_aware(None) is None
