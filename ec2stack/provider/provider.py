import pulumi
import pulumi_aws as aws
import pulumi_tls as tls


def create_aws_provider(name: str, args: dict, opts: pulumi.ResourceOptions = None) -> aws.Provider:
    """
    Creates an explicit AWS provider so the stack never picks up ambient defaults.

    Args:
        name: The unique name of the resource.
        args: Dictionary containing configuration options:
            - region: AWS region (required)
            - profile: Named profile from the shared config files (optional)
            - shared_config_files: Paths to AWS config files (default: ["~/.aws/config"])
            - shared_credentials_files: Paths to AWS credentials files (default: ["~/.aws/credentials"])
        opts: Additional resource options.
    """
    region = args.get("region")
    if not region:
        raise ValueError("region is required")

    provider_args = {
        "region": region,
        "shared_config_files": args.get("shared_config_files", ["~/.aws/config"]),
        "shared_credentials_files": args.get("shared_credentials_files", ["~/.aws/credentials"]),
    }

    if args.get("profile"):
        provider_args["profile"] = args["profile"]

    return aws.Provider(f"{name}-aws", **provider_args, opts=opts)


def create_tls_provider(name: str, opts: pulumi.ResourceOptions = None) -> tls.Provider:
    """Creates the TLS provider used for local key generation."""
    return tls.Provider(f"{name}-tls", opts=opts)
