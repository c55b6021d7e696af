# Infrastructure clients
from clients.pos_api_client import PosApiClient, PosApiError
from clients.valkey_client import ValkeyClient
