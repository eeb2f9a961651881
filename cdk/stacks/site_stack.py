import os

from aws_cdk import (
    Stack,
    CfnOutput,
    RemovalPolicy,
    aws_s3 as s3,
    aws_cloudfront as cf,
    aws_cloudfront_origins as origins,
    aws_certificatemanager as acm,
    aws_route53 as route53,
    aws_route53_targets as targets,
    aws_s3_deployment as s3deploy,
)
from constructs import Construct

FRONTEND_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "frontend")


def site_base_url(domain_name, subdomain, certificate_arn=None, base_url=None):
    """URL the API redirects to. The custom hostname is only served with a certificate."""
    if base_url:
        return base_url.rstrip("/")
    if certificate_arn:
        return f"https://{subdomain}.{domain_name}"
    raise ValueError(
        f"{subdomain}.{domain_name} is not served without a certificate_arn; "
        "pass -c certificate_arn=... or -c base_url=https://<distribution>.cloudfront.net"
    )


def config_js(api_url, variant):
    return f'window.API_URL = "{api_url}";\nwindow.VARIANT = "{variant}";\n'


class SiteStack(Stack):
    """Static signup form and the result pages the API redirects to."""

    def __init__(self, scope: Construct, construct_id: str,
                 domain_name: str,
                 subdomain: str,
                 api_url: str,
                 variant: str = "optin",
                 distribution_description: str = "Mailing list",
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        site_bucket = s3.Bucket(self, "SiteBucket",
                                block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
                                encryption=s3.BucketEncryption.S3_MANAGED,
                                removal_policy=RemovalPolicy.DESTROY,
                                auto_delete_objects=True)

        # ACM certificate (optional). Without one the default CloudFront domain is used.
        cert_arn = self.node.try_get_context("certificate_arn")
        certificate = None
        if cert_arn:
            certificate = acm.Certificate.from_certificate_arn(self, "Cert", cert_arn)

        distribution = cf.Distribution(self, "Distribution",
                                       default_behavior=cf.BehaviorOptions(
                                           origin=origins.S3BucketOrigin.with_origin_access_control(site_bucket),
                                           viewer_protocol_policy=cf.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                                       ),
                                       default_root_object="index.html",
                                       certificate=certificate,
                                       domain_names=[f"{subdomain}.{domain_name}"] if certificate else None,
                                       comment=distribution_description,
                                       enable_logging=False)

        hosted_zone_id = self.node.try_get_context("hosted_zone_id")
        if certificate and hosted_zone_id:
            zone = route53.HostedZone.from_hosted_zone_attributes(
                self, "HZ",
                hosted_zone_id=hosted_zone_id,
                zone_name=domain_name
            )
            route53.ARecord(self, "AliasRecord",
                            zone=zone,
                            record_name=subdomain,
                            target=route53.RecordTarget.from_alias(targets.CloudFrontTarget(distribution)))

        # config.js tells the signup form where the API lives and which fields it takes
        s3deploy.BucketDeployment(self, "DeployWebsite",
                                  destination_bucket=site_bucket,
                                  sources=[
                                      s3deploy.Source.asset(FRONTEND_DIR),
                                      s3deploy.Source.data("config.js", config_js(api_url, variant)),
                                  ],
                                  distribution=distribution,
                                  distribution_paths=["/*"])

        self.distribution_domain = distribution.distribution_domain_name
        CfnOutput(self, "SiteUrl", value=f"https://{distribution.distribution_domain_name}")
