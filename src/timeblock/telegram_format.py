"""Telegram message formatting utilities."""

import telegramify_markdown

MESSAGE_LIMIT = 4000


def chunk_lines(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split text into messages under `limit`, breaking between lines where possible."""
    chunks: list[str] = []
    current = ""
    for line in text.splitlines(keepends=True):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            chunks.append(current)
            current = ""
        current += line
    if current:
        chunks.append(current)
    return chunks


async def send_markdown(target, text: str, *, chat_id: int | None = None):
    """Send an agenda or board as MarkdownV2.

    target: a Bot (pass chat_id) or an Update.message (replies in place).
    """
    for chunk in chunk_lines(telegramify_markdown.markdownify(text)):
        if chat_id is not None:
            await target.send_message(chat_id=chat_id, text=chunk, parse_mode="MarkdownV2")
        else:
            await target.reply_text(chunk, parse_mode="MarkdownV2")
