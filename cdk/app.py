#!/usr/bin/env python3
import os
import aws_cdk as cdk
from stacks.site_stack import SiteStack, site_base_url
from stacks.api_stack import ApiStack

app = cdk.App()

env = cdk.Environment(
    account=os.getenv("CDK_DEFAULT_ACCOUNT"),
    region=os.getenv("CDK_DEFAULT_REGION", "us-east-1")  # For ACM cert on CloudFront, cert must be in us-east-1
)

domain_name = app.node.try_get_context("domain_name") or "example.com"
subdomain = app.node.try_get_context("subdomain") or "www"
# "optin" sends a confirmation email, "signup" stores the address straight away
variant = app.node.try_get_context("variant") or "optin"

# Redirect targets live on the static site
base_url = site_base_url(domain_name, subdomain,
                         certificate_arn=app.node.try_get_context("certificate_arn"),
                         base_url=app.node.try_get_context("base_url"))

api = ApiStack(app, "MailingListApiStack",
               env=env,
               table_name=app.node.try_get_context("table_name") or "mailing_list",
               variant=variant,
               base_url=base_url,
               sender_name=app.node.try_get_context("sender_name") or "Mailing List",
               sender_email=app.node.try_get_context("sender_email") or f"no-reply@{domain_name}",
               enable_xray=True)

site = SiteStack(app, "MailingListSiteStack",
                 env=env,
                 domain_name=domain_name,
                 subdomain=subdomain,
                 api_url=api.api_execute_url,
                 variant=variant,
                 distribution_description="Mailing list signup")

app.synth()
