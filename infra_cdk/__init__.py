"""
AWS CDK infrastructure for the containerised web application.

This package declares the CloudFront WAF stack (us-east-1) and the main
stack: networking, security groups, storage, ECS Fargate, Aurora MySQL with
RDS Proxy, load balancing, CloudFront, monitoring, and a database bastion.
"""
