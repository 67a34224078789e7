# pip install -e . && python scripts/fetch_assets.py
import asyncio

from glm_tokens import ChatMessage, glm, glm_chat

conversation = [
    ChatMessage.system("You are a helpful assistant"),
    ChatMessage.user("what is the weather in sf"),
    ChatMessage.assistant("It's always sunny in San Francisco!"),
    ChatMessage.user("and tomorrow?"),
]


async def main() -> None:
    raw, chat = await asyncio.gather(
        glm("what is the weather in sf"),
        glm_chat(conversation),
    )
    print(f"raw: {raw} tokens")
    print(f"chat: {chat} tokens")


asyncio.run(main())
