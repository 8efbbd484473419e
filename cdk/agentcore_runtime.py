from pathlib import Path

from aws_cdk import CfnOutput, CfnParameter, Stack
from aws_cdk import aws_bedrock_agentcore_alpha as agentcore
from aws_cdk import aws_ecr_assets as ecr_assets
from aws_cdk import aws_iam as iam
from constructs import Construct

DEFAULT_MODEL_ID = "jp.anthropic.claude-haiku-4-5-20251001-v1:0"

# Regions the jp cross-region inference profile routes to (Tokyo, Osaka)
BEDROCK_REGIONS = ("ap-northeast-1", "ap-northeast-3")

# Paths under the agent directory that are not part of the container image
ASSET_EXCLUDES = [
    "cdk",
    "cdk.out",
    "tests",
    ".venv",
    ".git",
    ".pytest_cache",
    "**/__pycache__",
]


class AgentCoreStack(Stack):
    """Stack for deploying the Strands agent to AWS Bedrock AgentCore Runtime"""

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        """
        Initialize AgentCore Runtime stack.

        Args:
            scope: CDK scope
            construct_id: Stack ID
            **kwargs: Additional stack parameters
        """
        super().__init__(scope, construct_id, **kwargs)

        # Bedrock model ID passed to the agent as MODEL_ID
        model_id_param = CfnParameter(
            self,
            "AgentModelId",
            type="String",
            description="Bedrock ModelID",
            default=DEFAULT_MODEL_ID,
        )

        # Get the path to the agent directory (parent of cdk directory)
        agent_dir = Path(__file__).parent.parent

        # Create IAM role for the agent runtime
        execution_role = iam.Role(
            self,
            "AgentExecutionRole",
            assumed_by=iam.ServicePrincipal(
                "bedrock-agentcore.amazonaws.com",
                conditions={
                    "StringEquals": {"aws:SourceAccount": Stack.of(self).account},
                    "ArnLike": {
                        "aws:SourceArn": f"arn:aws:bedrock-agentcore:{Stack.of(self).region}:{Stack.of(self).account}:*"
                    },
                },
            ),
            description="Execution role for Strands agent runtime",
        )

        # ECR permissions for pulling Docker images
        execution_role.add_to_policy(
            iam.PolicyStatement(
                sid="ECRImageAccess",
                actions=[
                    "ecr:BatchGetImage",
                    "ecr:GetDownloadUrlForLayer",
                    "ecr:GetAuthorizationToken",
                ],
                resources=["*"],
            )
        )

        # CloudWatch Logs permissions
        execution_role.add_to_policy(
            iam.PolicyStatement(
                actions=[
                    "logs:CreateLogGroup",
                    "logs:CreateLogStream",
                    "logs:PutLogEvents",
                    "logs:DescribeLogStreams",
                    "logs:DescribeLogGroups",
                ],
                resources=[
                    f"arn:aws:logs:{Stack.of(self).region}:{Stack.of(self).account}:log-group:/aws/bedrock-agentcore/runtimes/*",
                    f"arn:aws:logs:{Stack.of(self).region}:{Stack.of(self).account}:log-group:*",
                ],
            )
        )

        # X-Ray permissions for tracing
        execution_role.add_to_policy(
            iam.PolicyStatement(
                actions=[
                    "xray:PutTraceSegments",
                    "xray:PutTelemetryRecords",
                    "xray:GetSamplingRules",
                    "xray:GetSamplingTargets",
                ],
                resources=["*"],
            )
        )

        # CloudWatch metrics
        execution_role.add_to_policy(
            iam.PolicyStatement(
                actions=["cloudwatch:PutMetricData"],
                resources=["*"],
                conditions={"StringEquals": {"cloudwatch:namespace": "bedrock-agentcore"}},
            )
        )

        # Bedrock foundation models and inference profiles (Tokyo, Osaka).
        # Must cover every region the inference profile can route to.
        execution_role.add_to_policy(
            iam.PolicyStatement(
                sid="BedrockModelInvocation",
                actions=[
                    "bedrock:InvokeModel",
                    "bedrock:InvokeModelWithResponseStream",
                ],
                resources=bedrock_model_resources(Stack.of(self).account),
            )
        )

        # Build the image from the local Dockerfile and push it to ECR
        agent_runtime_artifact: agentcore.AgentRuntimeArtifact = (
            agentcore.AgentRuntimeArtifact.from_asset(
                str(agent_dir),
                platform=ecr_assets.Platform.LINUX_ARM64,
                exclude=ASSET_EXCLUDES,
            )
        )

        self.runtime = agentcore.Runtime(
            self,
            "AgentCoreRuntime",
            runtime_name="strands_agent",
            agent_runtime_artifact=agent_runtime_artifact,
            execution_role=execution_role,
            description="Strands Agent Runtime",
            network_configuration=agentcore.RuntimeNetworkConfiguration.using_public_network(),
            environment_variables={
                "MODEL_ID": model_id_param.value_as_string,
            },
        )

        self.agent_runtime_id = self.runtime.agent_runtime_id
        self.agent_runtime_arn = self.runtime.agent_runtime_arn

        # Set AGENT_RUNTIME_ARN to this value for invoke_agent.py
        CfnOutput(
            self,
            "RuntimeArn",
            value=self.agent_runtime_arn,
            description="ARN of the Strands AgentCore Runtime",
            export_name=f"{Stack.of(self).stack_name}-RuntimeArn",
        )

        CfnOutput(
            self,
            "RuntimeId",
            value=self.agent_runtime_id,
            description="ID of the Strands AgentCore Runtime",
            export_name=f"{Stack.of(self).stack_name}-RuntimeId",
        )


def bedrock_model_resources(account: str) -> list[str]:
    """Foundation model and inference profile ARNs for each Bedrock region."""
    foundation_models = [f"arn:aws:bedrock:{region}::foundation-model/*" for region in BEDROCK_REGIONS]
    inference_profiles = [
        f"arn:aws:bedrock:{region}:{account}:inference-profile/*" for region in BEDROCK_REGIONS
    ]
    return foundation_models + inference_profiles
