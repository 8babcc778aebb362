import pulumi
import pulumi_aws as aws
from typing import Dict, Iterable, List


ANY_IPV4 = "0.0.0.0/0"
ANY_IPV6 = "::/0"

ALLOW_ALL_EGRESS = {
    "protocol": "-1",
    "from_port": 0,
    "to_port": 0,
    "cidr_blocks": [ANY_IPV4],
    "ipv6_cidr_blocks": [ANY_IPV6],
    "description": "Allow all outbound traffic",
}

PORT_NAMES = {22: "SSH", 80: "HTTP", 443: "HTTPS"}


def normalize_ports(ports: Iterable) -> List[int]:
    """
    Validates a port list and drops duplicates, keeping first-seen order.

    Raises:
        ValueError: If the list is empty or a port is not an integer in 1-65535.
    """
    normalized = []
    for port in ports:
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError(f"Port must be an integer, got {port!r}")
        if not 1 <= port <= 65535:
            raise ValueError(f"Port {port} is outside 1-65535")
        if port not in normalized:
            normalized.append(port)

    if not normalized:
        raise ValueError("At least one ingress port is required")
    return normalized


def port_ingress_rules(
    ports: Iterable,
    cidr_blocks: List[str] = None,
    ipv6_cidr_blocks: List[str] = None,
) -> List[Dict]:
    """
    Expands a port list into one TCP ingress rule per port.

    Args:
        ports: Ports to open.
        cidr_blocks: IPv4 sources (default: ["0.0.0.0/0"])
        ipv6_cidr_blocks: IPv6 sources (default: ["::/0"])
    """
    cidr_blocks = [ANY_IPV4] if cidr_blocks is None else cidr_blocks
    ipv6_cidr_blocks = [ANY_IPV6] if ipv6_cidr_blocks is None else ipv6_cidr_blocks

    return [
        {
            "protocol": "tcp",
            "from_port": port,
            "to_port": port,
            "cidr_blocks": list(cidr_blocks),
            "ipv6_cidr_blocks": list(ipv6_cidr_blocks),
            "description": f"Allow {PORT_NAMES.get(port, f'port {port}')}",
        }
        for port in normalize_ports(ports)
    ]


class SecurityGroup(pulumi.ComponentResource):
    """
    A reusable security group component that creates AWS security groups with configurable rules.
    """

    def __init__(self, name: str, args: dict, opts: pulumi.ResourceOptions = None):
        """
        Creates a security group with specified ingress and egress rules.

        Args:
            name: The unique name of the resource.
            args: Dictionary containing configuration options:
                - vpc_id: VPC ID where the security group will be created (required)
                - description: Description of the security group (optional)
                - ingress_rules: List of ingress rule dictionaries (optional)
                - egress_rules: List of egress rule dictionaries (default: allow all)
                - tags: Dictionary of tags to apply (optional)
            opts: Additional resource options.
        """
        super().__init__("custom:security:SecurityGroup", name, {}, opts)

        vpc_id = args.get("vpc_id")
        if not vpc_id:
            raise ValueError("vpc_id is required")

        description = args.get("description", f"Security group for {name}")
        ingress_rules = args.get("ingress_rules", [])
        egress_rules = args.get("egress_rules") or [ALLOW_ALL_EGRESS]
        tags = args.get("tags", {})

        self.security_group = aws.ec2.SecurityGroup(
            f"{name}-sg",
            vpc_id=vpc_id,
            description=description,
            ingress=[aws.ec2.SecurityGroupIngressArgs(**self._rule_args(rule)) for rule in ingress_rules],
            egress=[aws.ec2.SecurityGroupEgressArgs(**self._rule_args(rule)) for rule in egress_rules],
            tags={**tags, "Name": name},
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs({
            "security_group_id": self.security_group.id,
            "security_group_name": self.security_group.name,
        })

    @staticmethod
    def _rule_args(rule: dict) -> dict:
        """
        Builds security group rule arguments from a dictionary.

        Args:
            rule: Dictionary containing rule configuration:
                - protocol: Protocol (tcp, udp, icmp, or -1 for all)
                - from_port: Start port
                - to_port: End port
                - cidr_blocks: List of CIDR blocks (optional)
                - ipv6_cidr_blocks: List of IPv6 CIDR blocks (optional)
                - description: Rule description (optional)
        """
        return {
            "protocol": rule.get("protocol", "tcp"),
            "from_port": rule.get("from_port", 0),
            "to_port": rule.get("to_port", 0),
            "cidr_blocks": rule.get("cidr_blocks", []),
            "ipv6_cidr_blocks": rule.get("ipv6_cidr_blocks", []),
            "description": rule.get("description", ""),
        }


class PortListSecurityGroup(SecurityGroup):
    """
    Security group opening a fixed list of TCP ports to every IPv4 and IPv6 source.
    """

    def __init__(self, name: str, args: dict, opts: pulumi.ResourceOptions = None):
        """
        Creates a security group with one ingress rule per port and unrestricted egress.

        Args:
            name: The unique name of the resource.
            args: Dictionary containing configuration options:
                - vpc_id: VPC ID (required)
                - ports: TCP ports to open (default: [22])
                - cidr_blocks: IPv4 sources (default: ["0.0.0.0/0"])
                - ipv6_cidr_blocks: IPv6 sources (default: ["::/0"])
                - tags: Dictionary of tags to apply (optional)
        """
        ports = normalize_ports(args.get("ports", [22]))

        ingress_rules = port_ingress_rules(
            ports,
            cidr_blocks=args.get("cidr_blocks"),
            ipv6_cidr_blocks=args.get("ipv6_cidr_blocks"),
        )
        pulumi.log.info(f"Opening inbound TCP ports {', '.join(str(port) for port in ports)}")

        description = "Allow {} access".format(
            ", ".join(PORT_NAMES.get(port, f"port {port}") for port in ports)
        )

        super().__init__(
            name,
            {
                **args,
                "description": args.get("description", description),
                "ingress_rules": ingress_rules,
                "egress_rules": [ALLOW_ALL_EGRESS],
            },
            opts,
        )
        self.ports = ports
