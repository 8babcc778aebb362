import ipaddress

import pytest
from pydantic import ValidationError

from ec2stack.config import StackSettings, load_settings


def test_defaults_match_original_environment(fake_config):
    settings = load_settings(fake_config())

    assert settings.profile == "k8s-admin"
    assert settings.region == "us-east-2"
    assert settings.availability_zone == "us-east-2a"
    assert settings.vpc_cidr == ipaddress.ip_network("10.0.0.0/16")
    assert settings.subnet_cidr == ipaddress.ip_network("10.0.1.0/24")
    assert settings.instance_type == "t2.micro"
    assert settings.ingress_ports == [22, 80, 443]
    assert settings.ami is None
    assert settings.ami_name_pattern == "amzn2-ami-hvm-*-x86_64-ebs"
    assert settings.ami_owners == ["amazon"]
    assert settings.key_name == "my-key-pair"
    assert settings.key_file == "id_rsa"
    assert settings.key_format == "openssh"
    assert settings.write_private_key is True


def test_settings_are_frozen():
    settings = StackSettings()

    with pytest.raises(ValidationError):
        settings.region = "eu-west-1"


def test_variant_defaults_apply_before_config(fake_config):
    settings = load_settings(
        fake_config(),
        defaults={"ingress_ports": [22], "ami": "ami-0fa49cc9dc8d62c84"},
    )

    assert settings.ingress_ports == [22]
    assert settings.ami == "ami-0fa49cc9dc8d62c84"


def test_config_values_override_variant_defaults(fake_config):
    settings = load_settings(
        fake_config({
            "region": "eu-west-1",
            "availabilityZone": "eu-west-1b",
            "ingressPorts": ["22", 8080],
            "ami": "ami-0123456789abcdef0",
            "writePrivateKey": False,
            "tags": {"Environment": "dev"},
        }),
        defaults={"ingress_ports": [22], "tags": {"Team": "infra"}},
    )

    assert settings.region == "eu-west-1"
    assert settings.availability_zone == "eu-west-1b"
    assert settings.ingress_ports == [22, 8080]
    assert settings.ami == "ami-0123456789abcdef0"
    assert settings.write_private_key is False
    assert settings.tags == {"Team": "infra", "Environment": "dev"}


@pytest.mark.parametrize(
    "values, message",
    [
        ({"vpcCidr": "10.0.0.0/33"}, "vpc_cidr"),
        ({"subnetCidr": "not-a-cidr"}, "subnet_cidr"),
        ({"subnetCidr": "192.168.1.0/24"}, "not inside vpc_cidr"),
        ({"subnetCidr": "fd00::/64"}, "not inside vpc_cidr"),
        ({"availabilityZone": "us-west-2a"}, "not in region"),
        ({"keyFormat": "putty"}, "key_format"),
        ({"ingressPorts": []}, "ingress_ports"),
        ({"ingressPorts": [0]}, "ingress_ports"),
        ({"ingressPorts": [65536]}, "ingress_ports"),
    ],
)
def test_invalid_settings_raise(fake_config, values, message):
    with pytest.raises(ValueError, match=message):
        load_settings(fake_config(values))


@pytest.mark.parametrize("ports", [[True, 22], [22.9], [22.0], ["ssh"], ["-22"], "22"])
def test_ports_must_be_integers(fake_config, ports):
    with pytest.raises(ValidationError, match="ingress_ports"):
        load_settings(fake_config({"ingressPorts": ports}))


def test_digit_strings_become_ports(fake_config):
    settings = load_settings(fake_config({"ingressPorts": ["443", "22"]}))

    assert settings.ingress_ports == [443, 22]


@pytest.mark.parametrize("owners", ["amazon", [], [123]])
def test_ami_owners_must_be_a_list_of_names(fake_config, owners):
    with pytest.raises(ValidationError, match="ami_owners"):
        load_settings(fake_config({"amiOwners": owners}))


def test_ami_owners_from_config(fake_config):
    settings = load_settings(fake_config({"amiOwners": ["amazon", "self"]}))

    assert settings.ami_owners == ["amazon", "self"]


def test_pattern_or_literal_required():
    with pytest.raises(ValueError, match="ami or ami_name_pattern"):
        StackSettings(ami=None, ami_name_pattern="")
