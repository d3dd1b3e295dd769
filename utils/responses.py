from rest_framework import status
from rest_framework.response import Response


def envelope(message, data=None, links=None, status_code=status.HTTP_200_OK):
    body = {'success': True, 'message': message, 'data': data}
    if links is not None:
        body['links'] = links
    return Response(body, status=status_code)
