import pulumi
import pulumi_aws as aws

from ec2stack.ec2.ami import resolve_ami


class Ec2Instance(pulumi.ComponentResource):
    """
    A single EC2 instance launched into a subnet with a public IP address.
    """

    def __init__(self, name: str, args: dict, opts: pulumi.ResourceOptions = None):
        """
        Creates an EC2 instance with the specified configuration.

        Args:
            name: The unique name of the resource.
            args: Dictionary containing configuration options:
                - subnet_id: Subnet ID to launch instance in (required)
                - security_group_ids: List of security group IDs (required)
                - instance_type: EC2 instance type (default: t2.micro)
                - ami: AMI ID to use (optional, looked up by ami_name_pattern when absent)
                - ami_name_pattern: AMI name filter used for the lookup (default: "amzn2-ami-hvm-*-x86_64-ebs")
                - ami_owners: AMI owners used for the lookup (default: ["amazon"])
                - key_name: SSH key pair name (optional)
                - associate_public_ip_address: Assign a public IP (default: True)
                - tags: Dictionary of tags to apply (optional)
            opts: Additional resource options.
        """
        super().__init__("custom:ec2:Ec2Instance", name, {}, opts)

        subnet_id = args.get("subnet_id")
        security_group_ids = args.get("security_group_ids", [])
        instance_type = args.get("instance_type", "t2.micro")
        key_name = args.get("key_name")
        associate_public_ip_address = args.get("associate_public_ip_address", True)
        tags = args.get("tags", {})

        if not subnet_id:
            raise ValueError("subnet_id is required")
        if not security_group_ids:
            raise ValueError("security_group_ids must be provided")

        # Lookups run through the same provider as the component
        self.ami_id = resolve_ami(
            ami=args.get("ami"),
            name_pattern=args.get("ami_name_pattern", "amzn2-ami-hvm-*-x86_64-ebs"),
            owners=args.get("ami_owners"),
            opts=pulumi.InvokeOptions(parent=self),
        )

        self.instance = aws.ec2.Instance(
            f"{name}-instance",
            instance_type=instance_type,
            ami=self.ami_id,
            key_name=key_name,
            subnet_id=subnet_id,
            vpc_security_group_ids=security_group_ids,
            associate_public_ip_address=associate_public_ip_address,
            tags={**tags, "Name": name},
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs({
            "instance_id": self.instance.id,
            "ami_id": self.ami_id,
            "public_ip": self.instance.public_ip,
            "public_dns": self.instance.public_dns,
            "private_ip": self.instance.private_ip,
        })
