#!/usr/bin/env python3
import os

import aws_cdk as cdk
from agentcore_runtime import AgentCoreStack

app = cdk.App()

env = cdk.Environment(
    account=os.getenv("CDK_DEFAULT_ACCOUNT"),
    region="ap-northeast-1",
)

AgentCoreStack(
    app,
    "StrandsAgentCoreStack",
    env=env,
    description="Stack for deploying a Strands Agent to AWS Bedrock AgentCore Runtime",
)

app.synth()
