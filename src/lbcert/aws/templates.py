"""CloudFormation template rendering for the load balancer stack.

The stack holds a VPC spread across ``zone_count`` availability zones, a NAT
instance reachable with the deployment key pair, and the load balancers for
the selected ``LBType``. Every TLS listener cites the certificate ARN.
"""

from __future__ import annotations

import base64
from enum import Enum
from typing import Any

from lbcert.lib.errors import InfrastructureUpdateError

KEY_PAIR_PARAMETER = "SSHKeyPairName"
NAT_AMI_PARAMETER = "NATImageId"
NAT_AMI_DEFAULT = "/aws/service/ami-amazon-linux-latest/amzn2-ami-hvm-x86_64-gp2"

VPC_CIDR = "10.0.0.0/16"
BOSH_SUBNET_CIDR = "10.0.0.0/24"
MAX_ZONES = 8

NAT_USER_DATA = """#!/bin/bash
sysctl -w net.ipv4.ip_forward=1
iptables -t nat -A POSTROUTING -o eth0 -s 10.0.0.0/16 -j MASQUERADE
"""


class LBType(str, Enum):
    """Load balancer layouts supported by the stack."""

    NONE = "none"
    CONCOURSE = "concourse"
    CF = "cf"


def internal_subnet_cidr(index: int) -> str:
    """Return the /20 CIDR of the internal subnet for a zone index."""
    return f"10.0.{16 * (index + 1)}.0/20"


def lb_subnet_cidr(index: int) -> str:
    """Return the /24 CIDR of the load balancer subnet for a zone index."""
    return f"10.0.{index + 2}.0/24"


def _zone(index: int) -> dict[str, Any]:
    return {"Fn::Select": [str(index), {"Fn::GetAZs": ""}]}


def _tags(name: str) -> list[dict[str, str]]:
    return [{"Key": "Name", "Value": name}]


def _ingress(
    protocol: str, port: int | str, cidr: str = "0.0.0.0/0"
) -> dict[str, Any]:
    if port == "all":
        return {"CidrIp": cidr, "IpProtocol": protocol, "FromPort": 0, "ToPort": 65535}
    return {"CidrIp": cidr, "IpProtocol": protocol, "FromPort": port, "ToPort": port}


def _listener(
    lb_port: int,
    instance_port: int,
    protocol: str,
    instance_protocol: str | None = None,
    certificate_arn: str | None = None,
) -> dict[str, Any]:
    listener: dict[str, Any] = {
        "LoadBalancerPort": str(lb_port),
        "InstancePort": str(instance_port),
        "Protocol": protocol,
        "InstanceProtocol": instance_protocol or protocol,
    }
    if certificate_arn:
        listener["SSLCertificateId"] = certificate_arn
    return listener


def _network_resources(zone_count: int) -> dict[str, Any]:
    resources: dict[str, Any] = {
        "VPC": {
            "Type": "AWS::EC2::VPC",
            "Properties": {
                "CidrBlock": VPC_CIDR,
                "EnableDnsHostnames": True,
                "Tags": [{"Key": "Name", "Value": {"Ref": "AWS::StackName"}}],
            },
        },
        "VPCGatewayInternetGateway": {"Type": "AWS::EC2::InternetGateway"},
        "VPCGatewayAttachment": {
            "Type": "AWS::EC2::VPCGatewayAttachment",
            "Properties": {
                "VpcId": {"Ref": "VPC"},
                "InternetGatewayId": {"Ref": "VPCGatewayInternetGateway"},
            },
        },
        "BOSHSubnet": {
            "Type": "AWS::EC2::Subnet",
            "Properties": {
                "VpcId": {"Ref": "VPC"},
                "CidrBlock": BOSH_SUBNET_CIDR,
                "AvailabilityZone": _zone(0),
                "Tags": _tags("BOSH"),
            },
        },
        "BOSHRouteTable": {
            "Type": "AWS::EC2::RouteTable",
            "Properties": {"VpcId": {"Ref": "VPC"}},
        },
        "BOSHRoute": {
            "Type": "AWS::EC2::Route",
            "DependsOn": "VPCGatewayAttachment",
            "Properties": {
                "DestinationCidrBlock": "0.0.0.0/0",
                "GatewayId": {"Ref": "VPCGatewayInternetGateway"},
                "RouteTableId": {"Ref": "BOSHRouteTable"},
            },
        },
        "BOSHSubnetRouteTableAssociation": {
            "Type": "AWS::EC2::SubnetRouteTableAssociation",
            "Properties": {
                "RouteTableId": {"Ref": "BOSHRouteTable"},
                "SubnetId": {"Ref": "BOSHSubnet"},
            },
        },
        "InternalSecurityGroup": {
            "Type": "AWS::EC2::SecurityGroup",
            "Properties": {
                "VpcId": {"Ref": "VPC"},
                "GroupDescription": "Internal",
                "SecurityGroupIngress": [
                    _ingress("tcp", "all", VPC_CIDR),
                    _ingress("udp", "all", VPC_CIDR),
                    {
                        "CidrIp": VPC_CIDR,
                        "IpProtocol": "icmp",
                        "FromPort": -1,
                        "ToPort": -1,
                    },
                ],
            },
        },
        "NATSecurityGroup": {
            "Type": "AWS::EC2::SecurityGroup",
            "Properties": {
                "VpcId": {"Ref": "VPC"},
                "GroupDescription": "NAT",
                "SecurityGroupIngress": [
                    _ingress("tcp", "all", VPC_CIDR),
                    _ingress("udp", "all", VPC_CIDR),
                ],
            },
        },
        "NATInstance": {
            "Type": "AWS::EC2::Instance",
            "Properties": {
                "ImageId": {"Ref": NAT_AMI_PARAMETER},
                "InstanceType": "t3.micro",
                "KeyName": {"Ref": KEY_PAIR_PARAMETER},
                "SourceDestCheck": False,
                "SubnetId": {"Ref": "BOSHSubnet"},
                "SecurityGroupIds": [{"Ref": "NATSecurityGroup"}],
                "UserData": base64.b64encode(NAT_USER_DATA.encode("utf-8")).decode(
                    "ascii"
                ),
                "Tags": _tags("NAT"),
            },
        },
        "NATEIP": {
            "Type": "AWS::EC2::EIP",
            "DependsOn": "VPCGatewayAttachment",
            "Properties": {"Domain": "vpc", "InstanceId": {"Ref": "NATInstance"}},
        },
        "InternalRouteTable": {
            "Type": "AWS::EC2::RouteTable",
            "Properties": {"VpcId": {"Ref": "VPC"}},
        },
        "InternalRoute": {
            "Type": "AWS::EC2::Route",
            "Properties": {
                "DestinationCidrBlock": "0.0.0.0/0",
                "InstanceId": {"Ref": "NATInstance"},
                "RouteTableId": {"Ref": "InternalRouteTable"},
            },
        },
    }

    for index in range(zone_count):
        number = index + 1
        resources[f"InternalSubnet{number}"] = {
            "Type": "AWS::EC2::Subnet",
            "Properties": {
                "VpcId": {"Ref": "VPC"},
                "CidrBlock": internal_subnet_cidr(index),
                "AvailabilityZone": _zone(index),
                "Tags": _tags(f"Internal{number}"),
            },
        }
        resources[f"InternalSubnet{number}RouteTableAssociation"] = {
            "Type": "AWS::EC2::SubnetRouteTableAssociation",
            "Properties": {
                "RouteTableId": {"Ref": "InternalRouteTable"},
                "SubnetId": {"Ref": f"InternalSubnet{number}"},
            },
        }
    return resources


def _lb_subnet_resources(zone_count: int) -> dict[str, Any]:
    resources: dict[str, Any] = {
        "LoadBalancerRouteTable": {
            "Type": "AWS::EC2::RouteTable",
            "Properties": {"VpcId": {"Ref": "VPC"}},
        },
        "LoadBalancerRoute": {
            "Type": "AWS::EC2::Route",
            "DependsOn": "VPCGatewayAttachment",
            "Properties": {
                "DestinationCidrBlock": "0.0.0.0/0",
                "GatewayId": {"Ref": "VPCGatewayInternetGateway"},
                "RouteTableId": {"Ref": "LoadBalancerRouteTable"},
            },
        },
    }
    for index in range(zone_count):
        number = index + 1
        resources[f"LoadBalancerSubnet{number}"] = {
            "Type": "AWS::EC2::Subnet",
            "Properties": {
                "VpcId": {"Ref": "VPC"},
                "CidrBlock": lb_subnet_cidr(index),
                "AvailabilityZone": _zone(index),
                "Tags": _tags(f"LoadBalancer{number}"),
            },
        }
        resources[f"LoadBalancerSubnet{number}RouteTableAssociation"] = {
            "Type": "AWS::EC2::SubnetRouteTableAssociation",
            "Properties": {
                "RouteTableId": {"Ref": "LoadBalancerRouteTable"},
                "SubnetId": {"Ref": f"LoadBalancerSubnet{number}"},
            },
        }
    return resources


def _load_balancer(
    name: str,
    security_group: str,
    zone_count: int,
    listeners: list[dict[str, Any]],
    health_check_target: str,
) -> dict[str, Any]:
    return {
        name: {
            "Type": "AWS::ElasticLoadBalancing::LoadBalancer",
            "DependsOn": "VPCGatewayAttachment",
            "Properties": {
                "CrossZone": True,
                "HealthCheck": {
                    "HealthyThreshold": "5",
                    "Interval": "12",
                    "Target": health_check_target,
                    "Timeout": "2",
                    "UnhealthyThreshold": "2",
                },
                "Listeners": listeners,
                "SecurityGroups": [{"Ref": security_group}],
                "Subnets": [
                    {"Ref": f"LoadBalancerSubnet{index + 1}"}
                    for index in range(zone_count)
                ],
            },
        }
    }


def _security_group(name: str, description: str, ports: list[int]) -> dict[str, Any]:
    return {
        name: {
            "Type": "AWS::EC2::SecurityGroup",
            "Properties": {
                "VpcId": {"Ref": "VPC"},
                "GroupDescription": description,
                "SecurityGroupIngress": [_ingress("tcp", port) for port in ports],
            },
        }
    }


def _concourse_resources(zone_count: int, certificate_arn: str) -> dict[str, Any]:
    resources = _security_group(
        "ConcourseSecurityGroup", "Concourse", [80, 443, 2222]
    )
    resources.update(
        _load_balancer(
            "ConcourseLoadBalancer",
            "ConcourseSecurityGroup",
            zone_count,
            [
                _listener(80, 8080, "TCP"),
                _listener(2222, 2222, "TCP"),
                _listener(443, 8080, "SSL", "TCP", certificate_arn),
            ],
            "TCP:8080",
        )
    )
    return resources


def _cf_resources(zone_count: int, certificate_arn: str) -> dict[str, Any]:
    resources = _security_group("CFRouterSecurityGroup", "Router", [80, 443, 4443])
    resources.update(_security_group("CFSSHProxySecurityGroup", "SSH Proxy", [2222]))
    resources.update(
        _load_balancer(
            "CFRouterLoadBalancer",
            "CFRouterSecurityGroup",
            zone_count,
            [
                _listener(80, 80, "HTTP"),
                _listener(443, 80, "HTTPS", "HTTP", certificate_arn),
                _listener(4443, 80, "SSL", "TCP", certificate_arn),
            ],
            "TCP:80",
        )
    )
    resources.update(
        _load_balancer(
            "CFSSHProxyLoadBalancer",
            "CFSSHProxySecurityGroup",
            zone_count,
            [_listener(2222, 2222, "TCP")],
            "TCP:2222",
        )
    )
    return resources


def _outputs(lb_type: LBType, zone_count: int) -> dict[str, Any]:
    outputs: dict[str, Any] = {
        "VPCID": {"Value": {"Ref": "VPC"}},
        "BOSHSubnet": {"Value": {"Ref": "BOSHSubnet"}},
        "InternalSecurityGroup": {"Value": {"Ref": "InternalSecurityGroup"}},
    }
    for index in range(zone_count):
        number = index + 1
        outputs[f"InternalSubnet{number}Name"] = {
            "Value": {"Ref": f"InternalSubnet{number}"}
        }
        outputs[f"InternalSubnet{number}AZ"] = {
            "Value": {"Fn::GetAtt": [f"InternalSubnet{number}", "AvailabilityZone"]}
        }
        outputs[f"InternalSubnet{number}CIDR"] = {"Value": internal_subnet_cidr(index)}

    if lb_type is LBType.CONCOURSE:
        outputs["ConcourseLoadBalancer"] = {"Value": {"Ref": "ConcourseLoadBalancer"}}
        outputs["ConcourseLoadBalancerURL"] = {
            "Value": {"Fn::GetAtt": ["ConcourseLoadBalancer", "DNSName"]}
        }
    elif lb_type is LBType.CF:
        outputs["CFRouterLoadBalancer"] = {"Value": {"Ref": "CFRouterLoadBalancer"}}
        outputs["CFRouterLoadBalancerURL"] = {
            "Value": {"Fn::GetAtt": ["CFRouterLoadBalancer", "DNSName"]}
        }
        outputs["CFSSHProxyLoadBalancer"] = {"Value": {"Ref": "CFSSHProxyLoadBalancer"}}
        outputs["CFSSHProxyLoadBalancerURL"] = {
            "Value": {"Fn::GetAtt": ["CFSSHProxyLoadBalancer", "DNSName"]}
        }
    return outputs


def build_template(
    lb_type: LBType | str, zone_count: int, certificate_arn: str
) -> dict[str, Any]:
    """Render the stack template.

    Args:
        lb_type: Load balancer layout; an empty value means ``none``
        zone_count: Number of availability zones to spread subnets across
        certificate_arn: Certificate reference cited by TLS listeners

    Returns:
        Template document ready to be serialized as JSON

    Raises:
        InfrastructureUpdateError: If the type or zone count is unsupported
    """
    try:
        resolved_type = LBType(lb_type or LBType.NONE.value)
    except ValueError as exc:
        raise InfrastructureUpdateError(
            f"Unsupported load balancer type: {lb_type}"
        ) from exc

    if not 1 <= zone_count <= MAX_ZONES:
        raise InfrastructureUpdateError(
            f"Availability zone count must be between 1 and {MAX_ZONES}, "
            f"got {zone_count}"
        )

    resources = _network_resources(zone_count)
    if resolved_type is not LBType.NONE:
        resources.update(_lb_subnet_resources(zone_count))
    if resolved_type is LBType.CONCOURSE:
        resources.update(_concourse_resources(zone_count, certificate_arn))
    elif resolved_type is LBType.CF:
        resources.update(_cf_resources(zone_count, certificate_arn))

    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Description": (
            f"BOSH infrastructure with {resolved_type.value} load balancers"
        ),
        "Parameters": {
            KEY_PAIR_PARAMETER: {
                "Type": "AWS::EC2::KeyPair::KeyName",
                "Description": "SSH key pair for the NAT instance",
            },
            NAT_AMI_PARAMETER: {
                "Type": "AWS::SSM::Parameter::Value<AWS::EC2::Image::Id>",
                "Default": NAT_AMI_DEFAULT,
            },
        },
        "Resources": resources,
        "Outputs": _outputs(resolved_type, zone_count),
    }
