"""Strands Agent server for AWS Bedrock AgentCore Runtime.

Exposes the two routes the AgentCore Runtime HTTP protocol expects:
- GET /ping: liveness probe, never touches the model or tools
- POST /invocations: raw request body (UTF-8 text) is the prompt

The agent talks to a Bedrock foundation model and has a single tool,
http_request from strands-agents-tools, for fetching web content.
"""

import logging
import os
import time

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from strands import Agent
from strands.models import BedrockModel
from strands_tools import http_request

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PORT = int(os.environ.get("PORT", "8080"))
MODEL_ID = os.environ.get("MODEL_ID", "jp.anthropic.claude-haiku-4-5-20251001-v1:0")

app = FastAPI(title="Strands Agent Server", version="1.0.0")

# Shared by every request, never mutated after startup
bedrock_model = BedrockModel(model_id=MODEL_ID)
AGENT_TOOLS = (http_request,)


class PingResponse(BaseModel):
    status: str
    time_of_last_update: int


class InvocationResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str


def create_agent() -> Agent:
    """Create an agent bound to the shared model and tool set.

    bedrock_model and AGENT_TOOLS are the process-wide configuration, built
    once at startup. Conversation history lives on the Agent instance, so
    each invocation gets a fresh one to keep requests independent of each
    other.
    """
    return Agent(model=bedrock_model, tools=list(AGENT_TOOLS), callback_handler=None)


def get_agent() -> Agent:
    return create_agent()


@app.get("/ping", response_model=PingResponse)
async def ping():
    return PingResponse(status="Healthy", time_of_last_update=int(time.time()))


@app.post(
    "/invocations",
    response_model=InvocationResponse,
    responses={500: {"model": ErrorResponse}},
)
async def invoke_agent(request: Request, strands_agent: Agent = Depends(get_agent)):
    try:
        body = await request.body()
        prompt = body.decode("utf-8")
        result = await strands_agent.invoke_async(prompt)
        return InvocationResponse(response=str(result))
    except Exception as e:
        logger.error(f"Error processing request: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )


if __name__ == "__main__":
    logger.info(f"AgentCore Runtime server listening on port {PORT} (model: {MODEL_ID})")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
