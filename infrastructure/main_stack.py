"""
Main CDK Stack for TickSolve.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
)
from constructs import Construct

from infrastructure.constructs.data_layer import DataLayerConstruct
from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.config.settings import Settings


class TickSolveStack(Stack):
    """Main stack wiring all constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "ticksolve")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Data layer: VPC, students database, ticket and login-attempt tables.
        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            environment=settings.environment,
            db_instance_class=settings.db_instance_class,
            db_allocated_storage=settings.db_allocated_storage,
        )

        # 2) API layer (single Lambda).
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            vpc=data_construct.vpc,
            db_secret_arn=data_construct.db_secret.secret_arn,
            session_secret_arn=data_construct.session_secret.secret_arn,
            tickets_table_name=data_construct.tickets_table.table_name,
            login_attempts_table_name=data_construct.login_attempts_table.table_name,
            max_login_attempts=settings.max_login_attempts,
            lockout_seconds=settings.lockout_seconds,
            session_ttl_minutes=settings.session_ttl_minutes,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # Permissions for the API Lambda.
        data_construct.db_secret.grant_read(api_construct.main_lambda)
        data_construct.session_secret.grant_read(api_construct.main_lambda)
        data_construct.tickets_table.grant_read_write_data(api_construct.main_lambda)
        data_construct.login_attempts_table.grant_read_write_data(api_construct.main_lambda)
        data_construct.db_instance.connections.allow_default_port_from(api_construct.main_lambda)

        # Outputs to quickly find resources.
        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "TicketsTable", value=data_construct.tickets_table.table_name)
        CfnOutput(self, "LoginAttemptsTable", value=data_construct.login_attempts_table.table_name)
