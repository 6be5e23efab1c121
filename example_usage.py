# example_usage.py

from dataclasses import dataclass

from rest_client import (
    ClientOptions,
    JsonDeserializer,
    JwtAuthenticator,
    LoggingConfig,
    RestClient,
    RestRequest,
)


@dataclass
class Post:
    userId: int
    id: int
    title: str
    body: str


def main():
    # Создаем опции: таймаут, логирование, политика ошибок
    options = ClientOptions(
        base_url="https://jsonplaceholder.typicode.com",
        max_timeout_ms=10_000,
        logging=LoggingConfig.create(level="INFO"),
    )

    with RestClient(options) as client:
        print("\n=== Typed GET ===")
        request = RestRequest("posts/{id}").add_url_segment("id", 1)
        response = client.execute(request, JsonDeserializer(Post))
        print(f"Status: {response.status.value} ({response.status_code})")
        if response.is_successful:
            print(f"Title: {response.data.title}")

        print("\n=== 404 is a completed exchange ===")
        response = client.get("posts/999999")
        print(f"Status: {response.status.value}, successful: {response.is_successful}")

        print("\n=== POST with a bearer token ===")
        client.authenticator = JwtAuthenticator("demo-token")
        response = client.post(
            "posts",
            body={"title": "Test Post", "body": "This is a test", "userId": 1},
            deserializer=JsonDeserializer(),
        )
        print(f"Status: {response.status_code}")
        print(f"Created ID: {response.data['id']}")


if __name__ == "__main__":
    main()
