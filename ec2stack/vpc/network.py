import pulumi
import pulumi_aws as aws


class VpcNetwork(pulumi.ComponentResource):
    """
    A VPC with one public subnet in a single availability zone, an internet gateway
    and a route table sending default traffic to the gateway.
    """

    def __init__(self, name: str, args: dict, opts: pulumi.ResourceOptions = None):
        """
        Creates a VPC with a single public subnet.

        Args:
            name: The unique name of the resource.
            args: Dictionary containing configuration options:
                - availability_zone: AZ for the subnet (required)
                - cidr_block: CIDR block for the VPC (default: "10.0.0.0/16")
                - subnet_cidr: CIDR block for the public subnet (default: "10.0.1.0/24")
                - enable_dns_hostnames: Enable DNS hostnames (default: True)
                - enable_dns_support: Enable DNS support (default: True)
                - tags: Dictionary of tags to apply (optional)
            opts: Additional resource options.
        """
        super().__init__("custom:network:VpcNetwork", name, {}, opts)

        availability_zone = args.get("availability_zone")
        if not availability_zone:
            raise ValueError("availability_zone is required")

        cidr_block = args.get("cidr_block", "10.0.0.0/16")
        subnet_cidr = args.get("subnet_cidr", "10.0.1.0/24")
        enable_dns_hostnames = args.get("enable_dns_hostnames", True)
        enable_dns_support = args.get("enable_dns_support", True)
        tags = args.get("tags", {})

        # Create VPC
        self.vpc = aws.ec2.Vpc(
            f"{name}-vpc",
            cidr_block=cidr_block,
            enable_dns_hostnames=enable_dns_hostnames,
            enable_dns_support=enable_dns_support,
            tags={**tags, "Name": f"{name}-vpc"},
            opts=pulumi.ResourceOptions(parent=self),
        )

        # Create public subnet
        self.public_subnet = aws.ec2.Subnet(
            f"{name}-public-subnet",
            vpc_id=self.vpc.id,
            cidr_block=subnet_cidr,
            availability_zone=availability_zone,
            tags={**tags, "Name": f"{name}-public-subnet", "Type": "public"},
            opts=pulumi.ResourceOptions(parent=self.vpc),
        )

        # Create Internet Gateway
        self.internet_gateway = aws.ec2.InternetGateway(
            f"{name}-igw",
            vpc_id=self.vpc.id,
            tags={**tags, "Name": f"{name}-igw"},
            opts=pulumi.ResourceOptions(parent=self.vpc),
        )

        # Route table with the default route inline
        self.route_table = aws.ec2.RouteTable(
            f"{name}-public-rt",
            vpc_id=self.vpc.id,
            routes=[
                aws.ec2.RouteTableRouteArgs(
                    cidr_block="0.0.0.0/0",
                    gateway_id=self.internet_gateway.id,
                ),
            ],
            tags={**tags, "Name": f"{name}-public-rt"},
            opts=pulumi.ResourceOptions(parent=self.vpc),
        )

        self.route_table_association = aws.ec2.RouteTableAssociation(
            f"{name}-public-rta",
            subnet_id=self.public_subnet.id,
            route_table_id=self.route_table.id,
            opts=pulumi.ResourceOptions(parent=self.route_table),
        )

        self.register_outputs({
            "vpc_id": self.vpc.id,
            "vpc_cidr": self.vpc.cidr_block,
            "public_subnet_id": self.public_subnet.id,
            "internet_gateway_id": self.internet_gateway.id,
            "route_table_id": self.route_table.id,
        })
