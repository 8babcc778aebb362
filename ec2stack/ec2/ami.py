from typing import List, Optional

import pulumi
import pulumi_aws as aws


def resolve_ami(
    ami: Optional[str] = None,
    name_pattern: Optional[str] = None,
    owners: Optional[List[str]] = None,
    opts: Optional[pulumi.InvokeOptions] = None,
) -> str:
    """
    Returns the image id to launch.

    A literal ``ami`` is used as is. Otherwise the images owned by ``owners``
    whose name matches ``name_pattern`` are looked up and the newest one wins.

    Raises:
        ValueError: If neither argument is given or the lookup finds nothing.
    """
    if ami:
        pulumi.log.info(f"Using configured AMI {ami}")
        return ami

    if not name_pattern:
        raise ValueError("Either ami or name_pattern must be provided")

    owners = owners or ["amazon"]
    result = aws.ec2.get_ami_ids(
        owners=owners,
        filters=[
            aws.ec2.GetAmiIdsFilterArgs(
                name="name",
                values=[name_pattern],
            ),
        ],
        opts=opts,
    )

    # Results come back newest first
    if not result.ids:
        raise ValueError(
            f"No AMI owned by {', '.join(owners)} matches name pattern {name_pattern!r}"
        )

    pulumi.log.info(f"Resolved AMI {result.ids[0]} from name pattern {name_pattern!r}")
    return result.ids[0]
