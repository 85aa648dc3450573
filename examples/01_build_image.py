"""Build a SoftLayer image template end to end.

Uploads a throwaway SSH key, boots a guest, waits until SoftLayer has
finished provisioning it, captures an image from its disk, and cleans up.

    SOFTLAYER_USERNAME=... SOFTLAYER_API_KEY=... python examples/01_build_image.py
"""

import asyncio
from dataclasses import replace
from pathlib import Path

import slbuilder as sl


async def main() -> None:
    sl.setup_logging(sl.LogConfig(level="INFO"))

    spec = sl.InstanceSpec(
        hostname="packer build",
        domain="example.com",
        datacenter="ams01",
        cpus=2,
        memory=2048,
        base_os_code="UBUNTU_LATEST",
    )
    public_key = (Path.home() / ".ssh" / "id_ed25519.pub").read_text().strip()

    async with sl.SoftLayerClient.from_config(sl.SoftLayer()) as client:
        key_id = await client.upload_ssh_key("packer-build", public_key)
        created = await client.create_instance(replace(spec, ssh_key_id=key_id))
        instance_id = str(created["id"])

        try:
            await client.wait_for_instance_ready(instance_id, timeout=900)
            print("Instance reachable at", await client.get_public_ip(instance_id))

            image = await client.capture_image(instance_id, "packer-base", "built by slbuilder")
            print("Capture transaction:", image.get("id"))
        except sl.WaitTimeoutError:
            print("Instance was not ready in time; it may still come up.")
        except sl.ProviderFailure as e:
            print("SoftLayer failed while provisioning:", e.__cause__)
        finally:
            await client.destroy_instance(instance_id)
            await client.destroy_ssh_key(key_id)


if __name__ == "__main__":
    asyncio.run(main())
