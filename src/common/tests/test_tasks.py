from django.core import mail

from common.tasks import send_email


def test_send_email_with_html_alternative() -> None:
    send_email(to="someone@example.com", subject="Hello", body="Plain", html_body="<p>Rich</p>")

    assert len(mail.outbox) == 1
    message = mail.outbox[0]
    assert message.to == ["someone@example.com"]
    assert message.subject == "Hello"
    assert message.alternatives[0][0] == "<p>Rich</p>"  # type: ignore[attr-defined]


def test_send_email_to_many() -> None:
    send_email(to=["a@example.com", "b@example.com"], subject="Hi", body="Plain")

    assert mail.outbox[0].to == ["a@example.com", "b@example.com"]
    assert mail.outbox[0].alternatives == []  # type: ignore[attr-defined]
