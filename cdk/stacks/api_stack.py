import os

from aws_cdk import (
    Stack,
    Duration,
    RemovalPolicy,
    aws_apigateway as apigw,
    aws_lambda as _lambda,
    aws_dynamodb as ddb,
    aws_iam as iam,
    aws_logs as logs,
)
from constructs import Construct

FUNCTIONS_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "functions")

# variant -> (partition key, handler, routes)
VARIANTS = {
    "optin": ("email", "mailinglist.optin.handler", ("subscribe", "verify", "unsubscribe")),
    "signup": ("id", "mailinglist.signup.handler", ("subscribe", "unsubscribe")),
}

STAGE_NAME = "prod"


class ApiStack(Stack):
    def __init__(self, scope: Construct, construct_id: str,
                 table_name: str = "mailing_list",
                 variant: str = "optin",
                 base_url: str = "",
                 sender_name: str = "",
                 sender_email: str = "",
                 enable_xray: bool = True,
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        if variant not in VARIANTS:
            raise ValueError(f"unknown variant {variant!r}, expected one of {sorted(VARIANTS)}")
        partition_key, handler, routes = VARIANTS[variant]

        table = ddb.Table(self, "ContactsTable",
                          table_name=table_name,
                          partition_key=ddb.Attribute(name=partition_key, type=ddb.AttributeType.STRING),
                          billing_mode=ddb.BillingMode.PAY_PER_REQUEST,
                          point_in_time_recovery=True,
                          removal_policy=RemovalPolicy.RETAIN)

        api = apigw.RestApi(self, "MailingListApi",
                            deploy_options=apigw.StageOptions(stage_name=STAGE_NAME,
                                                              metrics_enabled=True,
                                                              logging_level=apigw.MethodLoggingLevel.INFO,
                                                              tracing_enabled=enable_xray),
                            cloud_watch_role=True)

        # Built from the API id rather than api.url, which would make the
        # function depend on the stage that depends on the function.
        api_url = f"https://{api.rest_api_id}.execute-api.{self.region}.{self.url_suffix}/{STAGE_NAME}/"

        env = {
            "TABLE_NAME": table.table_name,
            "BASE_URL": base_url,
            "ERROR_PAGE": "/error.html",
            "SUCCESS_PAGE": "/success.html",
            "CONFIRM_SUBSCRIBE_PAGE": "/confirm-subscribe.html",
            "CONFIRM_UNSUBSCRIBE_PAGE": "/confirm-unsubscribe.html",
        }
        if variant == "optin":
            env.update({
                "SUBSCRIBE_PATH": "subscribe",
                "VERIFY_PATH": "verify",
                "UNSUBSCRIBE_PATH": "unsubscribe",
                "SENDER_NAME": sender_name,
                "SENDER_EMAIL": sender_email,
                "API_URL": api_url,
            })

        fn = _lambda.Function(self, "MailingListFn",
                              runtime=_lambda.Runtime.PYTHON_3_12,
                              handler=handler,
                              code=_lambda.Code.from_asset(FUNCTIONS_DIR),
                              environment=env,
                              timeout=Duration.seconds(10),
                              tracing=_lambda.Tracing.ACTIVE if enable_xray else _lambda.Tracing.DISABLED,
                              log_retention=logs.RetentionDays.TWO_WEEKS)

        table.grant_read_write_data(fn)
        if variant == "optin":
            fn.add_to_role_policy(iam.PolicyStatement(
                actions=["ses:SendEmail"],
                resources=["*"],
            ))

        integration = apigw.LambdaIntegration(fn, proxy=True)
        for route in routes:
            api.root.add_resource(route).add_method("GET", integration)

        self.table = table
        self.function = fn
        self.api_execute_url = api_url
