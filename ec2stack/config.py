"""
Stack settings read from Pulumi configuration.
"""
from typing import Annotated, Dict, List, Literal, Optional

import pulumi
from pydantic import BaseModel, Field, IPvAnyNetwork, model_validator


DEFAULT_PROFILE = "k8s-admin"
DEFAULT_REGION = "us-east-2"
DEFAULT_AVAILABILITY_ZONE = "us-east-2a"
DEFAULT_AMI_NAME_PATTERN = "amzn2-ami-hvm-*-x86_64-ebs"

Port = Annotated[int, Field(strict=True, ge=1, le=65535)]


class StackSettings(BaseModel, frozen=True, validate_default=True):
    """
    Settings for the single-instance stack.

    Attributes:
        profile: Named AWS profile from the shared config files
        region: AWS region
        availability_zone: AZ of the public subnet, must belong to region
        vpc_cidr: VPC CIDR block
        subnet_cidr: Public subnet CIDR block, must lie inside vpc_cidr
        instance_type: EC2 instance type
        ami: Literal image id (optional, looked up by ami_name_pattern otherwise)
        ami_name_pattern: Image name filter used for the lookup
        ami_owners: Image owners used for the lookup
        ingress_ports: TCP ports opened to everyone
        key_name: EC2 key pair name
        key_file: Local path of the private key
        key_format: Encoding of the private key file
        write_private_key: Write the private key to key_file
        tags: Extra tags for every resource
    """

    profile: str = DEFAULT_PROFILE
    region: str = DEFAULT_REGION
    availability_zone: str = DEFAULT_AVAILABILITY_ZONE
    vpc_cidr: IPvAnyNetwork = "10.0.0.0/16"
    subnet_cidr: IPvAnyNetwork = "10.0.1.0/24"
    instance_type: str = "t2.micro"
    ami: Optional[str] = None
    ami_name_pattern: str = DEFAULT_AMI_NAME_PATTERN
    ami_owners: List[str] = Field(default_factory=lambda: ["amazon"], min_length=1)
    ingress_ports: List[Port] = Field(default_factory=lambda: [22, 80, 443], min_length=1)
    key_name: str = "my-key-pair"
    key_file: str = "id_rsa"
    key_format: Literal["openssh", "pem"] = "openssh"
    write_private_key: bool = True
    tags: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_placement(self):
        if self.subnet_cidr.version != self.vpc_cidr.version or not self.subnet_cidr.subnet_of(self.vpc_cidr):
            raise ValueError(f"subnet_cidr {self.subnet_cidr} is not inside vpc_cidr {self.vpc_cidr}")
        if not self.availability_zone.startswith(self.region):
            raise ValueError(
                f"availability_zone {self.availability_zone} is not in region {self.region}"
            )
        if not self.ami and not self.ami_name_pattern:
            raise ValueError("Either ami or ami_name_pattern must be provided")
        return self


def _port_value(port):
    # Config values may arrive as strings; anything else is left for validation
    if isinstance(port, str) and port.isdigit():
        return int(port)
    return port


def load_settings(config: Optional[pulumi.Config] = None, defaults: Optional[dict] = None) -> StackSettings:
    """
    Builds the stack settings from Pulumi configuration.

    Args:
        config: Config to read from (default: the project's pulumi.Config()).
        defaults: StackSettings field overrides applied before config values,
            used by each program variant to set its own port list and image.

    Returns:
        The validated settings.

    Raises:
        pydantic.ValidationError: If a value is invalid (a ValueError subclass).
    """
    config = config or pulumi.Config()
    params = dict(defaults or {})

    ingress_ports = config.get_object("ingressPorts")
    if isinstance(ingress_ports, list):
        ingress_ports = [_port_value(port) for port in ingress_ports]

    values = {
        "profile": config.get("profile"),
        "region": config.get("region"),
        "availability_zone": config.get("availabilityZone"),
        "vpc_cidr": config.get("vpcCidr"),
        "subnet_cidr": config.get("subnetCidr"),
        "instance_type": config.get("instanceType"),
        "ami": config.get("ami"),
        "ami_name_pattern": config.get("amiNamePattern"),
        "ami_owners": config.get_object("amiOwners"),
        "ingress_ports": ingress_ports,
        "key_name": config.get("keyName"),
        "key_file": config.get("keyFile"),
        "key_format": config.get("keyFormat"),
        "write_private_key": config.get_bool("writePrivateKey"),
    }
    params.update({key: value for key, value in values.items() if value is not None})

    config_tags = config.get_object("tags")
    if config_tags:
        params["tags"] = {**params.get("tags", {}), **config_tags}

    return StackSettings(**params)
