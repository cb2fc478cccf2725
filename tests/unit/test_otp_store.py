"""Tests for the in-memory OTP store."""

import threading

import pytest

from clinic_notify.services.otp import OtpOutcome, OtpStore


def _scripted_codes(store, *codes):
    remaining = iter(codes)
    store._generate_code = lambda: next(remaining)


class TestIssue:
    """Code generation and record replacement."""

    def test_codes_are_six_digits(self, otp_store):
        for index in range(500):
            code = otp_store.issue(f"user{index}@example.com").code
            assert len(code) == 6
            assert code.isdigit()
            assert 100000 <= int(code) <= 999999

    def test_custom_code_length(self, clock):
        store = OtpStore(ttl_seconds=60, code_length=4, clock=clock)
        for index in range(200):
            code = store.issue(index).code
            assert 1000 <= int(code) <= 9999

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            OtpStore(code_length=0)

    def test_expiry_is_ttl_from_now(self, otp_store, clock):
        record = otp_store.issue("patient@example.com")
        assert (record.expires_at - clock()).total_seconds() == 300

    def test_reissue_replaces_previous_code(self, otp_store):
        _scripted_codes(otp_store, "111111", "222222")
        first = otp_store.issue("patient@example.com")
        second = otp_store.issue("patient@example.com")

        assert len(otp_store) == 1
        assert otp_store.validate("patient@example.com", first.code) == OtpOutcome.MISMATCH
        assert otp_store.validate("patient@example.com", second.code) == OtpOutcome.VALID

    def test_reissue_restarts_expiry(self, otp_store, clock):
        otp_store.issue("patient@example.com")
        clock.advance(299)
        record = otp_store.issue("patient@example.com")
        clock.advance(100)

        assert otp_store.validate("patient@example.com", record.code) == OtpOutcome.VALID


class TestValidate:
    """Outcomes of validation and their effect on stored records."""

    def test_valid_code_is_single_use(self, otp_store):
        record = otp_store.issue("patient@example.com")

        assert otp_store.validate("patient@example.com", record.code) == OtpOutcome.VALID
        assert otp_store.validate("patient@example.com", record.code) == OtpOutcome.NOT_FOUND
        assert "patient@example.com" not in otp_store

    def test_unknown_subject(self, otp_store):
        otp_store.issue("other@example.com")

        assert otp_store.validate("nobody@example.com", "123456") == OtpOutcome.NOT_FOUND
        assert len(otp_store) == 1

    def test_mismatch_keeps_record(self, otp_store):
        _scripted_codes(otp_store, "483920")
        otp_store.issue("patient@example.com")

        assert otp_store.validate("patient@example.com", "000000") == OtpOutcome.MISMATCH
        assert "patient@example.com" in otp_store
        assert otp_store.validate("patient@example.com", "483920") == OtpOutcome.VALID

    def test_exact_expiry_instant_is_expired(self, otp_store, clock):
        record = otp_store.issue("patient@example.com")
        clock.advance(300)

        assert otp_store.validate("patient@example.com", record.code) == OtpOutcome.EXPIRED
        assert "patient@example.com" not in otp_store

    def test_just_before_expiry_is_valid(self, otp_store, clock):
        record = otp_store.issue("patient@example.com")
        clock.advance(299.999)

        assert otp_store.validate("patient@example.com", record.code) == OtpOutcome.VALID

    def test_expired_after_301_seconds(self, otp_store, clock):
        record = otp_store.issue("x@example.com")
        clock.advance(301)

        assert otp_store.validate("x@example.com", record.code) == OtpOutcome.EXPIRED
        assert otp_store.validate("x@example.com", record.code) == OtpOutcome.NOT_FOUND

    def test_expiry_wins_over_wrong_code(self, otp_store, clock):
        otp_store.issue("patient@example.com")
        clock.advance(600)

        assert otp_store.validate("patient@example.com", "wrong") == OtpOutcome.EXPIRED
        assert len(otp_store) == 0

    def test_expired_records_are_not_swept_eagerly(self, otp_store, clock):
        otp_store.issue("a@example.com")
        clock.advance(600)
        otp_store.issue("b@example.com")

        assert "a@example.com" in otp_store

    def test_subject_is_opaque(self, otp_store):
        subject = ("clinic-7", 42)
        record = otp_store.issue(subject)

        assert otp_store.validate(("clinic-7", 42), record.code) == OtpOutcome.VALID

    def test_non_ascii_submission_is_a_mismatch(self, otp_store):
        _scripted_codes(otp_store, "123456")
        otp_store.issue("patient@example.com")

        assert otp_store.validate("patient@example.com", "１２３４５６") == OtpOutcome.MISMATCH


class TestLifecycle:
    """Explicit teardown and concurrent access."""

    def test_clear_drops_pending_challenges(self, otp_store):
        record = otp_store.issue("patient@example.com")
        otp_store.issue("other@example.com")
        otp_store.clear()

        assert len(otp_store) == 0
        assert otp_store.validate("patient@example.com", record.code) == OtpOutcome.NOT_FOUND

    def test_ttl_seconds_property(self, otp_store):
        assert otp_store.ttl_seconds == 300

    def test_concurrent_validation_accepts_code_once(self, otp_store):
        record = otp_store.issue("patient@example.com")
        workers = 16
        barrier = threading.Barrier(workers)
        outcomes = []
        outcomes_lock = threading.Lock()

        def attempt():
            barrier.wait()
            outcome = otp_store.validate("patient@example.com", record.code)
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=attempt) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count(OtpOutcome.VALID) == 1
        assert outcomes.count(OtpOutcome.NOT_FOUND) == workers - 1
