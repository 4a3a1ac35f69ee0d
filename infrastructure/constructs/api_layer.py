"""
API layer construct: shared Lambda + HTTP API routes.

A single Lambda keeps services warm across routes and reduces cold starts.
Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_ec2 as ec2,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct


class ApiLayerConstruct(Construct):
    """Expose login and ticket endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        vpc: ec2.IVpc,
        db_secret_arn: str,
        session_secret_arn: str,
        tickets_table_name: str,
        login_attempts_table_name: str,
        max_login_attempts: int = 5,
        lockout_seconds: int = 60,
        session_ttl_minutes: int = 60,
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 15,
    ) -> None:
        super().__init__(scope, construct_id)

        # Install the package and its runtime dependencies into the asset.
        bundled_code = _lambda.Code.from_asset(
            ".",
            exclude=["cdk.out", "tests", ".venv", "infrastructure"],
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install '.[postgres]' -t /asset-output",
                ],
            ),
        )

        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="ticksolve.handlers.main.lambda_handler",
            code=bundled_code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            vpc=vpc,
            environment={
                "ENVIRONMENT": environment,
                "STORAGE_BACKEND": "dynamodb",
                "TICKETS_TABLE": tickets_table_name,
                "LOGIN_ATTEMPTS_TABLE": login_attempts_table_name,
                "DB_SECRET_ARN": db_secret_arn,
                "SESSION_SECRET_ARN": session_secret_arn,
                "SESSION_TTL_MINUTES": str(session_ttl_minutes),
                "MAX_LOGIN_ATTEMPTS": str(max_login_attempts),
                "LOCKOUT_SECONDS": str(lockout_seconds),
            },
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        # HTTP API with minimal latency and low cost.
        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"ticksolve-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
                allow_headers=["Authorization", "Content-Type"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        route_defs = [
            (apigw.HttpMethod.GET, "/health"),
            (apigw.HttpMethod.POST, "/auth/login"),
            (apigw.HttpMethod.GET, "/tickets"),
            (apigw.HttpMethod.POST, "/tickets"),
            (apigw.HttpMethod.GET, "/tickets/{id}"),
            (apigw.HttpMethod.POST, "/tickets/{id}/comments"),
            (apigw.HttpMethod.POST, "/tickets/{id}/status"),
        ]

        for method, path in route_defs:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
