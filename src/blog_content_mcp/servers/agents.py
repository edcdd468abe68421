from logging import Logger
from typing import Any

from fastmcp import FastMCP
from fastmcp.prompts import Prompt
from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, ConfigDict, Field

from blog_content_mcp.servers.models.quiz import Quiz
from blog_content_mcp.servers.prompts.blog_agent import BLOG_AGENT_INSTRUCTIONS
from blog_content_mcp.servers.prompts.quiz_agent import QUIZ_AGENT_INSTRUCTIONS


class AgentDefinition(BaseModel):
    """The configuration of an agent: its instructions, the tools it may call and the type of its output."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="The identifier of the agent.")
    name: str = Field(description="The human-readable name of the agent.")
    description: str = Field(description="What the agent does.")
    instructions: str = Field(description="The system prompt of the agent.")
    tools: list[str] = Field(default_factory=list, description="The names of the tools the agent may call.")
    temperature: float = Field(default=0.0, description="The sampling temperature of the agent.")
    output_type: type[BaseModel] | None = Field(default=None, description="The model the agent output must validate against.")

    def get_instructions(self) -> str:
        return self.instructions

    def get_output_schema(self) -> dict[str, Any] | None:
        if self.output_type is None:
            return None

        return self.output_type.model_json_schema()

    def get_meta(self) -> dict[str, Any]:
        """The configuration a client needs to run the agent: the tools it may call and the schema of its output."""

        return {"tools": self.tools, "temperature": self.temperature, "output_schema": self.get_output_schema()}


BLOG_AGENT = AgentDefinition(
    id="blog-agent",
    name="Blog Agent",
    description=(
        "Agent restricted to the blog: it can only list, search, and load blog posts/tutorials, then answer strictly based on their "
        "content. If a question is out of scope, it politely refuses and suggests searching the blog instead."
    ),
    instructions=BLOG_AGENT_INSTRUCTIONS,
    tools=["list-contents", "search-contents", "get-content-with-metadata"],
)

QUIZ_AGENT = AgentDefinition(
    id="quiz-agent",
    name="Quiz Agent",
    description="Generates JSON quizzes (MCQs only) strictly matching the quiz schema. Output must be JSON only.",
    instructions=QUIZ_AGENT_INSTRUCTIONS,
    temperature=0.2,
    output_type=Quiz,
)


class AgentServer:
    """Exposes the instructions of the agents as MCP prompts."""

    agents: list[AgentDefinition]
    logger: Logger

    def __init__(self, agents: list[AgentDefinition] | None = None, logger: Logger | None = None):
        self.logger = logger or get_logger(name=__name__)
        self.agents = agents or [BLOG_AGENT, QUIZ_AGENT]

    def register_prompts(self, fastmcp: FastMCP[Any]) -> FastMCP[Any]:
        for agent in self.agents:
            prompt = Prompt.from_function(fn=agent.get_instructions, name=agent.id, description=agent.description, meta=agent.get_meta())

            _ = fastmcp.add_prompt(prompt=prompt)

        return fastmcp
