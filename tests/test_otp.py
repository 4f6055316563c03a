from datetime import datetime, timedelta

import pytest

from radical_backend.authentication import views
from radical_backend.authentication.models import OTP_COLLECTION
from radical_backend.authentication.views import (
    clear_verified_otp, generate_otp, get_verified_otp, issue_otp, verify_otp,
)
from radical_backend.records.views import read_collection, write_collection

EMAIL = 'owner@example.com'


def _otp_for(email):
    return next(o for o in read_collection(OTP_COLLECTION) if o['email'] == email)


def _wrong(code):
    return '100000' if code != '100000' else '100001'


def _shift_clock(monkeypatch, delta):
    later = datetime.now(views.now_utc().tzinfo) + delta
    monkeypatch.setattr(views, 'now_utc', lambda: later)


def test_generated_codes_are_six_digits():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999


def test_issue_stores_pending_record(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    otp = _otp_for(EMAIL)

    assert otp['verified'] is False
    assert otp['attempts'] == 0
    assert code not in otp['codeHash']
    created = datetime.fromisoformat(otp['createdAt'])
    expires = datetime.fromisoformat(otp['expiresAt'])
    assert expires - created == timedelta(minutes=10)


def test_issue_sends_code_by_email(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    assert len(mailbox.sent) == 1
    to_email, content = mailbox.sent[0]
    assert to_email == EMAIL
    assert code in content.text
    assert code in content.html


def test_issue_survives_email_failure(app_ctx, mailbox):
    mailbox.fail = True
    code = issue_otp(EMAIL)
    assert verify_otp(EMAIL, code)


def test_correct_code_verifies_exactly_once(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    assert verify_otp(EMAIL, code) is True
    assert verify_otp(EMAIL, code) is False
    assert _otp_for(EMAIL)['verified'] is True


def test_wrong_code_counts_an_attempt(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    assert verify_otp(EMAIL, _wrong(code)) is False
    assert _otp_for(EMAIL)['attempts'] == 1
    assert verify_otp(EMAIL, code) is True


def test_five_failures_lock_the_code(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    for _ in range(5):
        assert verify_otp(EMAIL, _wrong(code)) is False
    assert _otp_for(EMAIL)['attempts'] == 5
    assert verify_otp(EMAIL, code) is False


def test_attempts_stop_counting_at_the_limit(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    for _ in range(8):
        verify_otp(EMAIL, _wrong(code))
    assert _otp_for(EMAIL)['attempts'] == 5

    assert verify_otp(EMAIL, code) is False
    assert _otp_for(EMAIL)['attempts'] == 5


def test_reissue_unlocks_with_new_code(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    for _ in range(5):
        verify_otp(EMAIL, _wrong(code))
    new_code = issue_otp(EMAIL)
    assert verify_otp(EMAIL, new_code) is True


def test_expired_code_is_rejected(app_ctx, mailbox, monkeypatch):
    code = issue_otp(EMAIL)
    _shift_clock(monkeypatch, timedelta(minutes=10, seconds=1))
    assert verify_otp(EMAIL, code) is False


def test_code_still_valid_just_before_expiry(app_ctx, mailbox, monkeypatch):
    code = issue_otp(EMAIL)
    _shift_clock(monkeypatch, timedelta(minutes=9, seconds=59))
    assert verify_otp(EMAIL, code) is True


def test_new_issue_invalidates_previous_code(app_ctx, mailbox):
    first = issue_otp(EMAIL)
    second = issue_otp(EMAIL)
    records = [o for o in read_collection(OTP_COLLECTION) if o['email'] == EMAIL]
    assert len(records) == 1
    if first != second:
        assert verify_otp(EMAIL, first) is False
    assert verify_otp(EMAIL, second) is True


def test_codes_are_scoped_per_email(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    other = issue_otp('someone@example.com')
    assert verify_otp('someone@example.com', other) is True
    assert len(read_collection(OTP_COLLECTION)) == 2
    assert verify_otp(EMAIL, code) is True


def test_verify_without_issued_code_does_not_crash(app_ctx):
    assert verify_otp('nobody@example.com', '123456') is False
    assert verify_otp('nobody@example.com', None) is False
    assert read_collection(OTP_COLLECTION) == []


def test_issue_sweeps_expired_records(app_ctx, mailbox):
    issue_otp('stale@example.com')
    otps = read_collection(OTP_COLLECTION)
    otps[0]['expiresAt'] = (datetime.fromisoformat(otps[0]['createdAt']) - timedelta(minutes=1)).isoformat()
    write_collection(OTP_COLLECTION, otps)

    issue_otp(EMAIL)
    assert [o['email'] for o in read_collection(OTP_COLLECTION)] == [EMAIL]


def test_verified_otp_lookup_and_clear(app_ctx, mailbox):
    code = issue_otp(EMAIL)
    assert get_verified_otp(EMAIL) is None

    verify_otp(EMAIL, code)
    assert get_verified_otp(EMAIL)['email'] == EMAIL

    clear_verified_otp(EMAIL)
    assert get_verified_otp(EMAIL) is None
    assert read_collection(OTP_COLLECTION) == []


def test_verified_otp_expires(app_ctx, mailbox, monkeypatch):
    code = issue_otp(EMAIL)
    verify_otp(EMAIL, code)
    _shift_clock(monkeypatch, timedelta(minutes=11))
    assert get_verified_otp(EMAIL) is None


@pytest.mark.parametrize('code', ['abcdef', '', '12345'])
def test_malformed_codes_are_rejected(app_ctx, mailbox, code):
    issue_otp(EMAIL)
    assert verify_otp(EMAIL, code) is False
