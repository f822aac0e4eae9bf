import logging
from rest_framework import serializers


class LoggedModelSerializer(serializers.ModelSerializer):
    """ModelSerializer que registra create y update."""

    def _logger(self):
        return logging.getLogger(f"apps.serializers.{self.__class__.__name__}")

    def create(self, validated_data):
        """Create a model instance logging the input field names.

        Args:
            validated_data (dict): Data validated by the serializer.

        Returns:
            Model: The newly created model instance.
        """
        instance = super().create(validated_data)
        self._logger().info("create id=%s fields=%s", instance.pk, sorted(validated_data))
        return instance

    def update(self, instance, validated_data):
        """Update a model instance logging the changed field names.

        Args:
            instance (Model): Existing model instance to update.
            validated_data (dict): Data validated by the serializer.

        Returns:
            Model: The updated model instance.
        """
        instance = super().update(instance, validated_data)
        self._logger().info("update id=%s fields=%s", instance.pk, sorted(validated_data))
        return instance
