class IntegrationException(Exception):
    """Base exception for integration layer errors."""
    pass


# AWS EC2 Specific Exceptions

class EC2Exception(IntegrationException):
    """Base exception for AWS EC2 related errors."""
    pass


class EC2InstanceNotFoundException(EC2Exception):
    """Raised when an EC2 instance is not found."""
    pass


class EC2InstanceOperationException(EC2Exception):
    """Raised when an EC2 instance operation (describe/terminate) fails."""
    pass


class EC2AuthenticationException(EC2Exception):
    """Raised when AWS credentials are invalid or insufficient permissions."""
    pass


class EC2QuotaExceededException(EC2Exception):
    """Raised when AWS resource quota/limit is exceeded."""
    pass


class EC2InvalidParameterException(EC2Exception):
    """Raised when invalid parameters are provided to AWS API."""
    pass


# AWS Elastic Load Balancing (v2) Specific Exceptions

class ELBException(IntegrationException):
    """Base exception for AWS Elastic Load Balancing related errors."""
    pass


class ELBTargetGroupNotFoundException(ELBException):
    """Raised when the target group does not exist."""
    pass


class ELBTargetRegistrationException(ELBException):
    """Raised when a target cannot be registered with a target group."""
    pass


# AWS STS Specific Exceptions

class STSAssumeRoleException(IntegrationException):
    """Raised when temporary credentials cannot be obtained for a role."""
    pass
