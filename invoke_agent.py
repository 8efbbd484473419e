"""
Invoke the deployed Strands agent on AWS Bedrock AgentCore Runtime

Usage:
    python invoke_agent.py "<prompt>"

Example:
    AGENT_RUNTIME_ARN=arn:aws:bedrock-agentcore:ap-northeast-1:123456789012:runtime/strands_agent-xxx \\
        python invoke_agent.py "https://example.com の内容を要約してください"
"""

import logging
import os
import sys
import time
import uuid

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)

REGION = "ap-northeast-1"
QUALIFIER = "DEFAULT"

# RuntimeArn output of `cdk deploy`
AGENT_RUNTIME_ARN = os.environ.get(
    "AGENT_RUNTIME_ARN",
    "arn:aws:bedrock-agentcore:ap-northeast-1:123456789012:runtime/strands_agent-XXXXXXXXXX",
)

USAGE = 'Usage: python invoke_agent.py "<prompt>"'


class NoResponseError(RuntimeError):
    """Raised when AgentCore Runtime returns no response payload."""


def generate_session_id() -> str:
    """Generate a unique session ID (AgentCore requires at least 33 characters)."""
    return f"test-session-{int(time.time() * 1000)}-{uuid.uuid4().hex}"


def create_client():
    # Single attempt per invocation, no retries
    config = Config(retries={"max_attempts": 1, "mode": "standard"})
    return boto3.client("bedrock-agentcore", region_name=REGION, config=config)


def invoke_agent(prompt: str, client=None) -> str:
    """
    Send the prompt to the agent runtime and return its textual response.

    Args:
        prompt: The user prompt, sent as raw UTF-8 bytes
        client: Optional bedrock-agentcore client (created if omitted)

    Returns:
        Decoded response body
    """
    if client is None:
        client = create_client()

    session_id = generate_session_id()
    logger.info(f"Invoking agent: session={session_id}, runtime={AGENT_RUNTIME_ARN}")

    response = client.invoke_agent_runtime(
        runtimeSessionId=session_id,
        agentRuntimeArn=AGENT_RUNTIME_ARN,
        qualifier=QUALIFIER,
        payload=prompt.encode("utf-8"),
    )

    body = response.get("response")
    if not body:
        raise NoResponseError("No response received from agent")

    return body.read().decode("utf-8")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE, file=sys.stderr)
        return 1

    text_response = invoke_agent(args[0])
    print(f"Response: {text_response}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
