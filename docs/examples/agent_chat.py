import asyncio
import os

from dotenv import load_dotenv
from openai import AsyncOpenAI

from shell_agent import Agent, AgentConfig, OpenAIService, TerminalConfirmationGate, default_registry

# Load environment variables
load_dotenv()


async def main() -> None:
    """
    Interactive agent session using OpenAI. The conversation is kept between turns.
    """
    print("Welcome to the shell agent chat (OpenAI)!")

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        print("Error: OPENAI_API_KEY not found in environment variables.")
        return

    service = OpenAIService(client=AsyncOpenAI(api_key=api_key), model_name="gpt-4o-mini")
    agent = Agent(
        service,
        default_registry(),
        AgentConfig(max_iterations=8, working_dir=os.getcwd()),
        confirm=TerminalConfirmationGate(),
    )
    agent.set_system_prompt("You are a helpful assistant with access to a shell and the local filesystem.")

    print("\nStart chatting! Type 'exit' or 'quit' to stop, 'reset' to start over.")
    while True:
        user_input = input("\nYou: ").strip()
        if user_input.lower() in ["exit", "quit"]:
            print("Goodbye!")
            break
        if user_input.lower() == "reset":
            agent.reset()
            continue

        if not user_input:
            continue

        result = await agent.run(user_input)
        for execution in result.tools_used:
            status = "skipped" if execution.skipped else (execution.error or "ok")
            print(f"  [{execution.tool_name}] {status}")

        if result.success:
            print(f"Assistant: {result.final_answer}")
        else:
            print(f"The agent stopped: {result.error}")


if __name__ == "__main__":
    asyncio.run(main())
