from core.queue.tasks import task
from services.email_service import send_email

SEND_EMAIL_TASK = "send_email"


@task(SEND_EMAIL_TASK)
async def send_email_task(to: str, subject: str, html: str, text: str) -> bool:
    return await send_email(to=to, subject=subject, html=html, text=text)
