from logging import Logger
from typing import Any

from fastmcp import FastMCP
from fastmcp.tools import Tool
from fastmcp.utilities.logging import get_logger
from openai import AsyncOpenAI

from blog_content_mcp.clients.models.github import ContentWithMetaData
from blog_content_mcp.sampling.handler import get_generation_client, get_model
from blog_content_mcp.sampling.utility import new_user_sampling_message, structured_sample
from blog_content_mcp.servers.agents import QUIZ_AGENT, AgentDefinition
from blog_content_mcp.servers.content import ContentServer
from blog_content_mcp.servers.models.quiz import (
    DEFAULT_DIFFICULTY,
    DEFAULT_NUMBER_OF_QUESTIONS,
    BlogToQuizContext,
    BlogToQuizRequest,
    Quiz,
)
from blog_content_mcp.servers.prompts.quiz_agent import quiz_from_content_prompt
from blog_content_mcp.servers.shared.annotations import DIFFICULTY, NUMBER_OF_QUESTIONS, PATH
from blog_content_mcp.servers.shared.errors import GenerationNotConfiguredError, MissingInputError

QUIZ_MAX_TOKENS = 8000


class QuizServer:
    """Turns a blog post into a quiz: the content is fetched first, then the quiz agent generates the quiz from it."""

    content_server: ContentServer
    generation_client: AsyncOpenAI | None
    model: str
    agent: AgentDefinition
    logger: Logger

    def __init__(
        self,
        content_server: ContentServer,
        generation_client: AsyncOpenAI | None = None,
        model: str | None = None,
        agent: AgentDefinition | None = None,
        logger: Logger | None = None,
    ):
        self.logger = logger or get_logger(name=__name__)
        self.content_server = content_server
        self.generation_client = generation_client or get_generation_client()
        self.model = model or get_model()
        self.agent = agent or QUIZ_AGENT

    def register_tools(self, fastmcp: FastMCP[Any]) -> FastMCP[Any]:
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.blog_to_quiz, name="blog-to-quiz"))

        return fastmcp

    async def fetch_content_with_params(self, request: BlogToQuizRequest) -> BlogToQuizContext:
        """Fetch the content with its metadata and forward the quiz parameters."""

        content: ContentWithMetaData | None = await self.content_server.get_content_with_metadata(path=request.path)

        if content is None:
            raise MissingInputError(step="fetch-content-with-params", message="No content found.")

        return BlogToQuizContext(
            title=content.meta_data.title,
            content=content.content,
            number_of_questions=request.number_of_questions,
            difficulty=request.difficulty,
        )

    async def generate_quiz(self, context: BlogToQuizContext) -> Quiz:
        """Generate a quiz from the fetched content."""

        if self.generation_client is None:
            raise GenerationNotConfiguredError

        self.logger.info(f"Generating a {context.difficulty} quiz of {context.number_of_questions} questions for {context.title}.")

        output, _ = await structured_sample(
            client=self.generation_client,
            model=self.model,
            system_prompt=self.agent.instructions,
            messages=[new_user_sampling_message(content=quiz_from_content_prompt(context))],
            max_tokens=QUIZ_MAX_TOKENS,
            temperature=self.agent.temperature,
            response_model=self.agent.output_type or Quiz,
        )

        quiz: Quiz = Quiz.model_validate(output, from_attributes=True)

        self.logger.info(f"Generated quiz {quiz.title} with {len(quiz.questions)} questions.")

        return quiz

    async def blog_to_quiz(
        self,
        path: PATH,
        number_of_questions: NUMBER_OF_QUESTIONS = DEFAULT_NUMBER_OF_QUESTIONS,
        difficulty: DIFFICULTY = DEFAULT_DIFFICULTY,
    ) -> Quiz:
        """Takes an article/tutorial path, retrieves its content and generates a multiple-choice quiz from it. You can configure
        the number of questions and the difficulty level."""

        request = BlogToQuizRequest(path=path, number_of_questions=number_of_questions, difficulty=difficulty)

        context: BlogToQuizContext = await self.fetch_content_with_params(request=request)

        return await self.generate_quiz(context=context)
