import json
import boto3
import os
import logging

logger = logging.getLogger()
logger.setLevel(logging.INFO)

codedeploy = boto3.client('codedeploy')
lambda_client = boto3.client('lambda')

# CORS preflight never reads credentials or sends mail
SMOKE_TEST_EVENT = {
    'httpMethod': 'OPTIONS',
    'path': '/send-email',
    'headers': {'Origin': 'https://pre-deployment-test.invalid'},
    'body': None
}


def lambda_handler(event, context):
    """
    Pre-traffic hook for CodeDeploy.
    Sends a preflight request to the new version before shifting traffic.
    """
    logger.info(f"Pre-traffic hook triggered: {json.dumps(event)}")

    deployment_id = event['DeploymentId']
    lifecycle_event_hook_execution_id = event['LifecycleEventHookExecutionId']

    try:
        target_function = os.environ.get('TARGET_FUNCTION')
        if not target_function:
            raise Exception("TARGET_FUNCTION environment variable is not set")

        logger.info(f"Running preflight smoke test on {target_function}")

        response = lambda_client.invoke(
            FunctionName=target_function,
            InvocationType='RequestResponse',
            Payload=json.dumps(SMOKE_TEST_EVENT)
        )

        response_payload = json.loads(response['Payload'].read())
        logger.info(f"Test response: {json.dumps(response_payload)}")

        # Validate response
        if response.get('FunctionError'):
            raise Exception(f"Function returned error: {response_payload}")

        if response.get('StatusCode') != 200:
            raise Exception(f"Unexpected invoke status code: {response.get('StatusCode')}")

        if response_payload.get('statusCode') != 200:
            raise Exception(f"Invalid preflight status: {response_payload.get('statusCode')}")

        headers = response_payload.get('headers') or {}
        if 'Access-Control-Allow-Origin' not in headers:
            raise Exception("Preflight response is missing CORS headers")

        logger.info("Pre-traffic validation passed")

        # Report success
        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Succeeded'
        )

        return {
            'statusCode': 200,
            'body': json.dumps('Pre-traffic validation succeeded')
        }

    except Exception as e:
        logger.error(f"Pre-traffic validation failed: {str(e)}", exc_info=True)

        # Report failure - this will prevent deployment
        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Failed'
        )

        return {
            'statusCode': 500,
            'body': json.dumps(f'Pre-traffic validation failed: {str(e)}')
        }
